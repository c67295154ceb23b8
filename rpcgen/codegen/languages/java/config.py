"""
Java-specific configuration and symbol tables.

All non-generated classes are referred to by fully qualified names so they
never collide with generated ones. The tables below are the defaults; any
entry can be overridden through ``GeneratorConfig.symbols``.
"""

from typing import Any, Dict

from ...core.planner import ArtifactKind
from ...core.semantics import InteractionSemantic


JAVA_INTERFACE_SYMBOLS = {
    "Generated": "javax.annotation.Generated",
    "ByteBuf": "io.netty.buffer.ByteBuf",
    "Iterable": "Iterable",
}

JAVA_CLIENT_SYMBOLS = {
    "Flux": "reactor.core.publisher.Flux",
    "Mono": "reactor.core.publisher.Mono",
    "Override": "java.lang.Override",
    "Generated": "javax.annotation.Generated",
    "RSocketRpcGenerated": "io.rsocket.rpc.annotations.internal.Generated",
    "RSocketRpcGeneratedMethod": "io.rsocket.rpc.annotations.internal.GeneratedMethod",
    "RSocketRpcResourceType": "io.rsocket.rpc.annotations.internal.ResourceType",
    "RSocket": "io.rsocket.RSocket",
    "ByteBuf": "io.netty.buffer.ByteBuf",
    "Unpooled": "io.netty.buffer.Unpooled",
    "MeterRegistry": "io.micrometer.core.instrument.MeterRegistry",
    "BlockingIterable": "io.rsocket.rpc.BlockingIterable",
    "Iterable": "Iterable",
    "Queues": "reactor.util.concurrent.Queues",
    "MetadataEncoder": "io.rsocket.ipc.MetadataEncoder",
}

JAVA_SERVER_SYMBOLS = {
    "Flux": "reactor.core.publisher.Flux",
    "Mono": "reactor.core.publisher.Mono",
    "Function": "java.util.function.Function",
    "BiFunction": "java.util.function.BiFunction",
    "Override": "java.lang.Override",
    "Publisher": "org.reactivestreams.Publisher",
    "Generated": "javax.annotation.Generated",
    "RSocketRpcGenerated": "io.rsocket.rpc.annotations.internal.Generated",
    "RSocketRpcResourceType": "io.rsocket.rpc.annotations.internal.ResourceType",
    "Payload": "io.rsocket.Payload",
    "ByteBufPayload": "io.rsocket.util.ByteBufPayload",
    "AbstractRSocketService": "io.rsocket.rpc.AbstractRSocketService",
    "RSocketRpcMetrics": "io.rsocket.rpc.metrics.Metrics",
    "MeterRegistry": "io.micrometer.core.instrument.MeterRegistry",
    "ByteBuf": "io.netty.buffer.ByteBuf",
    "ByteBufAllocator": "io.netty.buffer.ByteBufAllocator",
    "CodedInputStream": "com.google.protobuf.CodedInputStream",
    "CodedOutputStream": "com.google.protobuf.CodedOutputStream",
    "MessageLite": "com.google.protobuf.MessageLite",
    "Parser": "com.google.protobuf.Parser",
    "Iterable": "Iterable",
    "Scheduler": "reactor.core.scheduler.Scheduler",
    "Schedulers": "reactor.core.scheduler.Schedulers",
    "Optional": "java.util.Optional",
    "Inject": "javax.inject.Inject",
    "Named": "javax.inject.Named",
    "SpanContext": "io.opentracing.SpanContext",
    "Map": "java.util.Map",
    "IPCFunction": "io.rsocket.ipc.util.IPCFunction",
    "IPCChannelFunction": "io.rsocket.ipc.util.IPCChannelFunction",
    "String": "java.lang.String",
    "Void": "java.lang.Void",
    "Signal": "reactor.core.publisher.Signal",
    "Exception": "java.lang.Exception",
    "MetadataDecoder": "io.rsocket.ipc.MetadataDecoder",
    "CompositeMetadataDecoder": "io.rsocket.ipc.decoders.CompositeMetadataDecoder",
}

JAVA_SYMBOLS = {
    ArtifactKind.INTERFACE: JAVA_INTERFACE_SYMBOLS,
    ArtifactKind.CLIENT_STUB: JAVA_CLIENT_SYMBOLS,
    ArtifactKind.SERVER_STUB: JAVA_SERVER_SYMBOLS,
}

# Publisher element type of each server handler, by semantic
JAVA_SERVER_RESPONSE_TYPES = {
    InteractionSemantic.ONE_WAY: ("Mono", "Void"),
    InteractionSemantic.UNARY_SINGLE_RESPONSE: ("Mono", "Payload"),
    InteractionSemantic.SERVER_STREAM: ("Flux", "Payload"),
    InteractionSemantic.CLIENT_OR_BIDI_STREAM: ("Flux", "Payload"),
}

# Registry parameter names of selfRegister, by semantic
JAVA_REGISTRY_NAMES = {
    InteractionSemantic.ONE_WAY: "fireAndForgetRegistry",
    InteractionSemantic.UNARY_SINGLE_RESPONSE: "requestResponseRegistry",
    InteractionSemantic.SERVER_STREAM: "requestStreamRegistry",
    InteractionSemantic.CLIENT_OR_BIDI_STREAM: "requestChannelRegistry",
}


class JavaConfig:
    """Java-specific configuration."""

    def __init__(self, **kwargs):
        """Initialize Java configuration."""
        self.class_prefix: str = kwargs.get("class_prefix", "Blocking")
        self.client_suffix: str = kwargs.get("client_suffix", "Client")
        self.server_suffix: str = kwargs.get("server_suffix", "Server")
        self.metrics_name: str = kwargs.get("metrics_name", "rsocket.server")

    def interface_name(self, service_name: str) -> str:
        return f"{self.class_prefix}{service_name}"

    def client_name(self, service_name: str) -> str:
        return f"{self.class_prefix}{service_name}{self.client_suffix}"

    def server_name(self, service_name: str) -> str:
        return f"{self.class_prefix}{service_name}{self.server_suffix}"

    def delegate_client_name(self, service_name: str) -> str:
        """Non-blocking client the blocking client delegates to."""
        return f"{service_name}{self.client_suffix}"

    def as_dict(self) -> Dict[str, Any]:
        return dict(vars(self))
