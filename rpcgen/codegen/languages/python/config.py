"""
Python-specific configuration and symbol tables.

Symbols map the local name a template uses to the dotted path it is
imported from, so ``"Payload": "rsocket.payload.Payload"`` becomes
``from rsocket.payload import Payload``. Any entry can be overridden
through ``GeneratorConfig.symbols``.
"""

from collections import defaultdict
from typing import Any, Dict, List

from ...core.planner import ArtifactKind
from ...core.semantics import InteractionSemantic


PYTHON_INTERFACE_SYMBOLS = {
    "ABC": "abc.ABC",
    "abstractmethod": "abc.abstractmethod",
    "AsyncIterable": "typing.AsyncIterable",
    "AsyncIterator": "typing.AsyncIterator",
}

PYTHON_CLIENT_SYMBOLS = {
    "AsyncIterable": "typing.AsyncIterable",
    "AsyncIterator": "typing.AsyncIterator",
    "Payload": "rsocket.payload.Payload",
    "encode_metadata": "rsocket_rpc.metadata.encode_metadata",
}

PYTHON_SERVER_SYMBOLS = {
    "AsyncIterable": "typing.AsyncIterable",
    "AsyncIterator": "typing.AsyncIterator",
    "Optional": "typing.Optional",
    "Payload": "rsocket.payload.Payload",
    "AbstractRSocketService": "rsocket_rpc.service.AbstractRSocketService",
    "decode_metadata": "rsocket_rpc.metadata.decode_metadata",
    "timed": "rsocket_rpc.metrics.timed",
    "identity": "rsocket_rpc.metrics.identity",
}

PYTHON_SYMBOLS = {
    ArtifactKind.INTERFACE: PYTHON_INTERFACE_SYMBOLS,
    ArtifactKind.CLIENT_STUB: PYTHON_CLIENT_SYMBOLS,
    ArtifactKind.SERVER_STUB: PYTHON_SERVER_SYMBOLS,
}

# Keyword names of the server's self_register, by semantic
PYTHON_REGISTRY_NAMES = {
    semantic: f"{semantic.value}_registry" for semantic in InteractionSemantic
}


def symbol_imports(symbols: Dict[str, str]) -> List[str]:
    """
    Import statements for a symbol table, one per module, sorted.

    Symbols without a module part are builtins and need no import.
    """
    by_module = defaultdict(list)
    for local_name, path in symbols.items():
        module, _, attr = path.rpartition(".")
        if not module:
            continue
        by_module[module].append(attr if attr == local_name else f"{attr} as {local_name}")
    return [
        f"from {module} import {', '.join(sorted(names))}"
        for module, names in sorted(by_module.items())
    ]


class PythonConfig:
    """Python-specific configuration."""

    def __init__(self, **kwargs):
        """Initialize Python configuration."""
        self.messages_module_suffix: str = kwargs.get("messages_module_suffix", "_pb2")
        self.client_suffix: str = kwargs.get("client_suffix", "Client")
        self.server_suffix: str = kwargs.get("server_suffix", "Server")
        self.metrics_name: str = kwargs.get("metrics_name", "rsocket.server")
        # package -> generated module, for message types of other files
        self.type_modules: Dict[str, str] = dict(kwargs.get("type_modules", {}))
        self.method_case: str = kwargs.get("method_case", "snake")

    def interface_name(self, service_name: str) -> str:
        return service_name

    def client_name(self, service_name: str) -> str:
        return f"{service_name}{self.client_suffix}"

    def server_name(self, service_name: str) -> str:
        return f"{service_name}{self.server_suffix}"

    def as_dict(self) -> Dict[str, Any]:
        return dict(vars(self))
