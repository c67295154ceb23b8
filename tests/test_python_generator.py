import ast

import pytest

from rpcgen.codegen.core.config import load_config
from rpcgen.codegen.core.generator import generate_code
from rpcgen.codegen.core.planner import plan_service
from rpcgen.codegen.core.schema import convert_descriptor
from rpcgen.codegen.core.semantics import InteractionSemantic
from rpcgen.codegen.languages.python import (
    PythonGenerator,
    messages_module_name,
    python_type_ref,
    symbol_imports,
)


@pytest.fixture
def python_result(python_generator, greeter_file):
    result = generate_code(python_generator, greeter_file)
    assert result.success
    return result


@pytest.fixture
def python_files(python_result):
    return python_result.files


class TestPythonNaming:
    def test_messages_module(self):
        assert messages_module_name("greeter") == "greeter_pb2"
        assert messages_module_name("my-api.v1") == "my_api_v1_pb2"

    def test_own_package_types(self):
        assert python_type_ref("a.b.Outer.Inner", "a.b", "x_pb2") == ("x_pb2", "Outer.Inner", True)

    def test_mapped_foreign_types(self):
        modules = {"google.protobuf": "google.protobuf.empty_pb2"}
        assert python_type_ref("google.protobuf.Empty", "a.b", "x_pb2", modules) == (
            "google.protobuf.empty_pb2",
            "Empty",
            True,
        )

    def test_unmapped_foreign_types(self):
        assert python_type_ref("other.Thing", "a.b", "x_pb2") == ("x_pb2", "Thing", False)

    def test_symbol_imports(self):
        imports = symbol_imports({
            "Payload": "rsocket.payload.Payload",
            "AsyncIterator": "typing.AsyncIterator",
            "AsyncIterable": "typing.AsyncIterable",
            "Iter": "typing.Iterator",
            "bytes": "bytes",
        })
        assert imports == [
            "from rsocket.payload import Payload",
            "from typing import AsyncIterable, AsyncIterator, Iterator as Iter",
        ]


class TestPythonFiles:
    def test_module_per_artifact(self, python_files):
        assert sorted(python_files) == ["greeter_client.py", "greeter_server.py", "greeter_service.py"]

    def test_generated_code_parses(self, python_files):
        for path, code in python_files.items():
            ast.parse(code, filename=path)

    def test_empty_service_parses(self, python_generator, make_service):
        plan = plan_service(make_service(name="Idle"))
        files = python_generator.generate_service(plan, convert_descriptor({"package": "pkg"}))
        assert sorted(files) == ["idle_client.py", "idle_server.py", "idle_service.py"]
        for path, code in files.items():
            ast.parse(code, filename=path)
        server = files["idle_server.py"]
        assert 'raise NotImplementedError("Request Channel is not implemented.")' in server
        assert "        pass\n" in server

    def test_unmapped_type_warns(self, python_result):
        assert any("google.protobuf.Empty" in w for w in python_result.warnings)


class TestPythonService:
    def test_constants_and_class(self, python_files):
        code = python_files["greeter_service.py"]
        assert 'SERVICE_ID = "io.example.greeter.Greeter"' in code
        assert 'METHOD_SAY_HELLO = "SayHello"' in code
        assert 'ROUTE_SAY_HELLO = SERVICE_ID + "." + METHOD_SAY_HELLO' in code
        assert "class Greeter(ABC):" in code
        assert "import greeter_pb2" in code

    def test_signatures(self, python_files):
        code = python_files["greeter_service.py"]
        assert (
            "async def say_hello(self, message: greeter_pb2.HelloRequest, metadata: bytes) "
            "-> greeter_pb2.HelloResponse:"
        ) in code
        assert "async def notify_hello(self, message: greeter_pb2.HelloRequest, metadata: bytes) -> None:" in code
        assert (
            "async def collect_hellos(self, messages: AsyncIterable[greeter_pb2.HelloRequest], "
            "metadata: bytes) -> greeter_pb2.HelloResponse:"
        ) in code
        assert "-> AsyncIterator[greeter_pb2.HelloResponse]:" in code

    def test_docstrings(self, python_files):
        tree = ast.parse(python_files["greeter_service.py"])
        service = next(node for node in tree.body if isinstance(node, ast.ClassDef))
        assert "Says hello in many ways." in ast.get_docstring(service)
        say_hello = next(
            node for node in service.body
            if isinstance(node, ast.AsyncFunctionDef) and node.name == "say_hello"
        )
        assert ast.get_docstring(say_hello) == "Greets one person."


class TestPythonClientAndServer:
    def test_client(self, python_files):
        code = python_files["greeter_client.py"]
        assert "class GreeterClient(Greeter):" in code
        assert "await self._rsocket.fire_and_forget(self._payload(ROUTE_NOTIFY_HELLO, message, metadata))" in code
        assert "async for response in self._rsocket.request_stream(" in code
        assert "from greeter_service import (" in code

    def test_server_dispatch(self, python_files):
        code = python_files["greeter_server.py"]
        assert "class GreeterServer(AbstractRSocketService):" in code
        assert "if route == ROUTE_SAY_HELLO:" in code
        assert "return await self._do_say_hello_request_response(payload.data, metadata)" in code
        assert "fire_and_forget_registry[ROUTE_NOTIFY_HELLO] = self._do_notify_hello_fire_and_forget" in code
        assert "is not implemented." not in code

    def test_acronym_handler_names(self, python_generator, make_service):
        assert (
            PythonGenerator.handler_name("GetURL", InteractionSemantic.UNARY_SINGLE_RESPONSE)
            == "_do_get_url_request_response"
        )
        plan = plan_service(make_service(("GetURL", False, False, False), name="Links"))
        server = python_generator.generate_service(plan, convert_descriptor({"package": "pkg"}))[
            "links_server.py"
        ]
        assert "async def _do_get_url_request_response(self" in server
        assert "request_response_registry[ROUTE_GET_URL] = self._do_get_url_request_response" in server

    def test_server_metrics(self, python_files, greeter_file):
        code = python_files["greeter_server.py"]
        assert (
            'self._say_hello_metrics = timed(registry, "rsocket.server", '
            "service=SERVICE_ID, method=METHOD_SAY_HELLO)"
        ) in code

        generator = PythonGenerator(load_config("python", {"enable_metrics": False}))
        plain = generate_code(generator, greeter_file).files["greeter_server.py"]
        assert "_metrics" not in plain
        ast.parse(plain)

    def test_package_name(self, greeter_file):
        generator = PythonGenerator(load_config("python", {"package_name": "io_example.rpc"}))
        files = generate_code(generator, greeter_file).files
        assert "io_example/rpc/greeter_server.py" in files
        code = files["io_example/rpc/greeter_server.py"]
        assert "from io_example.rpc import greeter_pb2" in code
        assert "from io_example.rpc.greeter_service import (" in code

    def test_method_case(self, greeter_file):
        generator = PythonGenerator(load_config("python", {"language_config": {"method_case": "camel"}}))
        code = generate_code(generator, greeter_file).files["greeter_service.py"]
        assert "async def sayHello(" in code
