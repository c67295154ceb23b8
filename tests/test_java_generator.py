import pytest

from rpcgen.codegen.core.config import load_config
from rpcgen.codegen.core.generator import generate_code
from rpcgen.codegen.core.planner import ArtifactKind, plan_service
from rpcgen.codegen.core.schema import convert_descriptor
from rpcgen.codegen.languages.java import JavaGenerator, create_java_generator
from rpcgen.codegen.languages.java.naming import java_class_name, java_package_for

PACKAGE_DIR = "io/example/greeter/rpc"


@pytest.fixture
def java_files(java_generator, greeter_file):
    result = generate_code(java_generator, greeter_file)
    assert result.success
    return result.files


@pytest.fixture
def server_code(java_files):
    return java_files[f"{PACKAGE_DIR}/BlockingGreeterServer.java"]


class TestJavaNaming:
    def test_package_prefers_java_package_option(self):
        assert java_package_for("a.b", {"java_package": "com.x"}) == "com.x"
        assert java_package_for("a.b", {}) == "a.b"
        assert java_package_for("a.b", {"java_package": "com.x"}, override="org.y") == "org.y"

    def test_class_names(self):
        options = {"java_package": "com.x", "java_outer_classname": "Protos"}
        assert java_class_name("a.b.Req", "a.b", options) == "com.x.Protos.Req"
        options["java_multiple_files"] = True
        assert java_class_name("a.b.Req", "a.b", options) == "com.x.Req"
        assert java_class_name("google.protobuf.Empty", "a.b", options) == "google.protobuf.Empty"


class TestJavaFiles:
    def test_one_file_per_artifact(self, java_files):
        assert sorted(java_files) == [
            f"{PACKAGE_DIR}/BlockingGreeter.java",
            f"{PACKAGE_DIR}/BlockingGreeterClient.java",
            f"{PACKAGE_DIR}/BlockingGreeterServer.java",
        ]
        for code in java_files.values():
            assert code.startswith("package io.example.greeter.rpc;\n")
            assert code.endswith("}\n")

    def test_version_in_header(self, java_files, greeter_file):
        code = java_files[f"{PACKAGE_DIR}/BlockingGreeter.java"]
        assert 'value = "by RSocket RPC proto compiler (version 0.1.0)"' in code
        assert 'comments = "Source: greeter.proto")' in code

        generator = create_java_generator(disable_version=True)
        files = generate_code(generator, greeter_file).files
        assert 'value = "by RSocket RPC proto compiler",' in files[f"{PACKAGE_DIR}/BlockingGreeter.java"]


class TestJavaInterface:
    def test_constants(self, java_files):
        code = java_files[f"{PACKAGE_DIR}/BlockingGreeter.java"]
        assert 'String SERVICE_ID = "io.example.greeter.Greeter";' in code
        assert 'String METHOD_SAY_HELLO = "SayHello";' in code
        assert 'String ROUTE_SAY_HELLO = SERVICE_ID + "." + METHOD_SAY_HELLO;' in code

    def test_method_signatures(self, java_files):
        code = java_files[f"{PACKAGE_DIR}/BlockingGreeter.java"]
        request = "io.example.greeter.rpc.HelloRequest"
        response = "io.example.greeter.rpc.HelloResponse"
        assert f"{response} sayHello({request} message, io.netty.buffer.ByteBuf metadata);" in code
        assert f"void notifyHello({request} message, io.netty.buffer.ByteBuf metadata);" in code
        assert f"Iterable<{response}> streamHellos({request} message," in code
        assert f"{response} collectHellos(Iterable<{request}> messages," in code
        assert f"Iterable<{response}> chatHellos(Iterable<{request}> messages," in code

    def test_declaration_order(self, java_files):
        code = java_files[f"{PACKAGE_DIR}/BlockingGreeter.java"]
        positions = [code.index(f" {name}(") for name in ("streamHellos", "sayHello", "chatHellos")]
        assert positions == sorted(positions)

    def test_comments_are_escaped(self, java_generator):
        proto = convert_descriptor({
            "services": [{
                "name": "S",
                "comments": " Ends */ early @deprecated",
                "methods": [],
            }]
        })
        code = generate_code(java_generator, proto).files["BlockingS.java"]
        assert " * <pre>" in code
        assert "Ends *&#47; early &#64;deprecated" in code


class TestJavaClient:
    def test_blocking_shapes(self, java_files):
        code = java_files[f"{PACKAGE_DIR}/BlockingGreeterClient.java"]
        assert "private final io.example.greeter.rpc.GreeterClient delegate;" in code
        assert "delegate.notifyHello(message, metadata).block();" in code
        assert "return delegate.sayHello(message, metadata).block();" in code
        assert "notifyHello(message, io.netty.buffer.Unpooled.EMPTY_BUFFER);" in code
        assert "return sayHello(message, io.netty.buffer.Unpooled.EMPTY_BUFFER);" in code
        assert "io.rsocket.rpc.BlockingIterable<io.example.greeter.rpc.HelloResponse> streamHellos(" in code
        assert "returnTypeClass = Void.class" in code


class TestJavaServer:
    def test_dispatch_cases(self, server_code):
        assert "case BlockingGreeter.ROUTE_SAY_HELLO: {" in server_code
        assert "return this.doSayHelloRequestResponse(data, metadata, spanContext);" in server_code
        assert "return this.doChatHellosRequestChannel(reactor.core.publisher.Flux.from(payloads), data, metadata, spanContext);" in server_code

    def test_every_entry_point_is_emitted(self, server_code):
        for name in ("fireAndForget", "requestResponse", "requestStream", "requestChannel"):
            assert f" {name}(io.rsocket.Payload payload" in server_code
        assert "is not implemented." not in server_code

    def test_self_registration(self, server_code):
        assert (
            "requestChannelRegistry.put(BlockingGreeter.ROUTE_CHAT_HELLOS, this::doChatHellosRequestChannel);"
            in server_code
        )
        assert (
            "fireAndForgetRegistry.put(BlockingGreeter.ROUTE_NOTIFY_HELLO, this::doNotifyHelloFireAndForget);"
            in server_code
        )

    def test_handlers_follow_semantic_order(self, server_code):
        handlers = [
            "doNotifyHelloFireAndForget(io.netty",
            "doSayHelloRequestResponse(io.netty",
            "doStreamHellosRequestStream(io.netty",
            "doChatHellosRequestChannel(reactor",
            "doCollectHellosRequestChannel(reactor",
        ]
        positions = [server_code.index(h) for h in handlers]
        assert positions == sorted(positions)

    def test_metrics(self, server_code):
        assert (
            'this.sayHelloMetrics = io.rsocket.rpc.metrics.Metrics.timed(registry.get(), "rsocket.server", '
            '"service", BlockingGreeter.SERVICE_ID, "method", BlockingGreeter.METHOD_SAY_HELLO);'
        ) in server_code
        assert ".transform(sayHelloMetrics)" in server_code

    def test_metrics_disabled(self, greeter_file):
        generator = JavaGenerator(load_config("java", {"enable_metrics": False}))
        code = generate_code(generator, greeter_file).files[f"{PACKAGE_DIR}/BlockingGreeterServer.java"]
        assert "Metrics.timed" not in code
        assert ".transform(" not in code

    def test_empty_service(self, java_generator, make_service):
        plan = plan_service(make_service(name="Idle"))
        files = java_generator.generate_service(plan, convert_descriptor({"package": "pkg"}))
        code = files["pkg/BlockingIdleServer.java"]
        for label in ("Fire And Forget", "Request Response", "Request Stream", "Request Channel"):
            assert f'new UnsupportedOperationException("{label} is not implemented.")' in code
        assert "doDecodeAndHandle" not in code
        assert ".put(" not in code


class TestJavaOptions:
    def test_custom_symbols(self, greeter_file):
        generator = JavaGenerator(
            load_config("java", {"symbols": {"Generated": "javax.annotation.processing.Generated"}})
        )
        files = generate_code(generator, greeter_file).files
        assert "@javax.annotation.processing.Generated(" in files[f"{PACKAGE_DIR}/BlockingGreeter.java"]

    def test_indent_size(self, greeter_file):
        generator = JavaGenerator(load_config("java", {"indent_size": 4}))
        code = generate_code(generator, greeter_file).files[f"{PACKAGE_DIR}/BlockingGreeter.java"]
        assert '\n    String SERVICE_ID = "io.example.greeter.Greeter";' in code

    def test_reserved_method_names_are_renamed(self, java_generator, make_service):
        proto = convert_descriptor({
            "services": [{
                "name": "S",
                "methods": [{"name": "Import", "input_type": "A", "output_type": "B"}],
            }]
        })
        result = generate_code(java_generator, proto)
        assert " import_(A message," in result.files["BlockingS.java"]
        assert any("renamed to import_" in w for w in result.warnings)

    def test_method_data_for_interface(self, java_generator, greeter_file, greeter_service):
        plan = plan_service(greeter_service)
        context = java_generator.build_context(plan, ArtifactKind.INTERFACE, greeter_file)
        assert context["interface_name"] == "BlockingGreeter"
        assert [m["method_name"] for m in context["methods"]][:2] == ["streamHellos", "sayHello"]
