"""Shared fixtures for the rpcgen test suite."""

import json

import pytest

from rpcgen.codegen.core.config import load_config
from rpcgen.codegen.core.schema import MethodDefinition, ServiceDefinition, convert_descriptor
from rpcgen.codegen.languages.java import JavaGenerator
from rpcgen.codegen.languages.python import PythonGenerator


@pytest.fixture
def greeter_descriptor():
    """One method of every interaction model, in a deliberately mixed order."""
    return {
        "name": "greeter.proto",
        "package": "io.example.greeter",
        "options": {"java_package": "io.example.greeter.rpc", "java_multiple_files": True},
        "services": [
            {
                "name": "Greeter",
                "comments": " Says hello in many ways.\n",
                "methods": [
                    {
                        "name": "StreamHellos",
                        "input_type": ".io.example.greeter.HelloRequest",
                        "output_type": ".io.example.greeter.HelloResponse",
                        "server_streaming": True,
                    },
                    {
                        "name": "SayHello",
                        "input_type": ".io.example.greeter.HelloRequest",
                        "output_type": ".io.example.greeter.HelloResponse",
                        "comments": " Greets one person.\n",
                    },
                    {
                        "name": "ChatHellos",
                        "inputType": ".io.example.greeter.HelloRequest",
                        "outputType": ".io.example.greeter.HelloResponse",
                        "clientStreaming": True,
                        "serverStreaming": True,
                    },
                    {
                        "name": "NotifyHello",
                        "input_type": ".io.example.greeter.HelloRequest",
                        "output_type": ".google.protobuf.Empty",
                        "options": {"fire_and_forget": True},
                    },
                    {
                        "name": "CollectHellos",
                        "input_type": ".io.example.greeter.HelloRequest",
                        "output_type": ".io.example.greeter.HelloResponse",
                        "client_streaming": True,
                    },
                ],
            }
        ],
    }


@pytest.fixture
def greeter_file(greeter_descriptor):
    return convert_descriptor(greeter_descriptor)


@pytest.fixture
def greeter_service(greeter_file):
    return greeter_file.services[0]


@pytest.fixture
def make_service():
    """Build a service from (name, client_streaming, server_streaming, one_way) tuples."""

    def _make(*methods, name="Svc", namespace="pkg"):
        return ServiceDefinition(
            name=name,
            namespace=namespace,
            methods=tuple(
                MethodDefinition(
                    name=method_name,
                    input_type=f"{namespace}.Req",
                    output_type=f"{namespace}.Resp",
                    client_streaming=client,
                    server_streaming=server,
                    one_way=one_way,
                )
                for method_name, client, server, one_way in methods
            ),
        )

    return _make


@pytest.fixture
def java_generator():
    return JavaGenerator(load_config("java"))


@pytest.fixture
def python_generator():
    return PythonGenerator(load_config("python"))


@pytest.fixture
def descriptor_path(tmp_path, greeter_descriptor):
    path = tmp_path / "greeter.json"
    path.write_text(json.dumps(greeter_descriptor), encoding="utf-8")
    return path
