import logging

import pytest

from rpcgen.codegen import generate_from_descriptor, quick_generate
from rpcgen.codegen.core.generator import (
    GenerationResult,
    GeneratorError,
    ServiceFailure,
    generate_code,
    reindent,
)
from rpcgen.codegen.core.schema import convert_descriptor
from rpcgen.codegen.languages.java import JavaGenerator


def _method(name, **flags):
    return {"name": name, "input_type": "pkg.Req", "output_type": "pkg.Resp", **flags}


@pytest.fixture
def mixed_descriptor():
    return {
        "name": "mixed.proto",
        "package": "pkg",
        "services": [
            {"name": "Broken", "methods": [_method("getUser"), _method("get_user")]},
            {"name": "Fine", "methods": [_method("Ping")]},
            {"name": "Nameless", "methods": [_method("---")]},
        ],
    }


class TestFailureIsolation:
    def test_failing_service_does_not_stop_others(self, java_generator, mixed_descriptor):
        result = generate_code(java_generator, convert_descriptor(mixed_descriptor))

        assert not result.success
        assert result.error_message is None
        assert sorted(result.files) == [
            "pkg/BlockingFine.java",
            "pkg/BlockingFineClient.java",
            "pkg/BlockingFineServer.java",
        ]
        assert list(result.plans) == ["Fine"]

        assert [f.rule for f in result.failures] == ["duplicate-route", "invalid-identifier"]
        broken = result.failures[0]
        assert broken.service_name == "Broken"
        assert broken.method_names == ("getUser", "get_user")
        assert "Service 'Broken' skipped [duplicate-route]" in broken.describe()
        assert result.failures[1].method_names == ("---",)

    def test_metadata(self, java_generator, mixed_descriptor):
        result = generate_code(java_generator, convert_descriptor(mixed_descriptor))
        assert result.metadata["service_count"] == 3
        assert result.metadata["generated_services"] == 1
        assert result.metadata["failed_services"] == 2
        assert result.metadata["file_count"] == 3
        assert result.metadata["language"] == "java"

    def test_failures_are_logged(self, java_generator, mixed_descriptor, caplog):
        with caplog.at_level(logging.ERROR, logger="rpcgen"):
            generate_code(java_generator, convert_descriptor(mixed_descriptor))
        assert any("Broken" in record.getMessage() for record in caplog.records)


class TestResults:
    def test_error_result(self):
        error = ValueError("boom")
        result = GenerationResult.error("it failed", exception=error)
        assert not result.success
        assert result.exception is error
        assert result.files == {}

    def test_code_joins_files(self):
        result = GenerationResult(files={"a": "one\n", "b": "two\n"})
        assert result.code == "one\n\ntwo\n"

    def test_failure_describe_without_methods(self):
        failure = ServiceFailure("S", (), "invalid-identifier", "service name is empty")
        assert failure.describe() == "Service 'S' skipped [invalid-identifier]: service name is empty"

    def test_reindent(self):
        assert reindent("a\n  b\n    c\n   d", 2, 4) == "a\n    b\n        c\n     d"
        assert reindent("  x", 2, 2) == "  x"


class TestConvenienceApi:
    def test_generate_from_descriptor(self, greeter_descriptor):
        result = generate_from_descriptor(greeter_descriptor, "py")
        assert result.success
        assert "greeter_server.py" in result.files

    def test_quick_generate(self, greeter_descriptor):
        files = quick_generate(greeter_descriptor, "java", enable_metrics=False)
        assert len(files) == 3

    def test_quick_generate_raises_on_failure(self, mixed_descriptor):
        with pytest.raises(RuntimeError, match="duplicate-route"):
            quick_generate(mixed_descriptor, "java")

    def test_no_services_warns(self, java_generator):
        result = generate_code(java_generator, convert_descriptor({"name": "empty.proto"}))
        assert result.success
        assert result.files == {}
        assert result.warnings == ["File 'empty.proto' declares no services"]

    def test_ignored_one_way_flag_warns(self, java_generator):
        descriptor = {"services": [{"name": "S", "methods": [_method("Watch", server_streaming=True, one_way=True)]}]}
        result = generate_code(java_generator, convert_descriptor(descriptor))
        assert any("one-way flag is ignored" in w for w in result.warnings)


class MissingTemplateGenerator(JavaGenerator):
    def template_name(self, artifact):
        return "missing.java.j2"


def test_template_failure_ends_run(greeter_file):
    result = generate_code(MissingTemplateGenerator(), greeter_file)
    assert result.error_message.startswith("Code generation failed for service 'Greeter'")
    assert isinstance(result.exception, GeneratorError)
    assert result.files == {}


def test_shared_handler_name_skips_service(python_generator):
    descriptor = {
        "package": "pkg",
        "services": [
            {"name": "Codes", "methods": [_method("AB"), _method("aB")]},
            {"name": "Fine", "methods": [_method("Ping")]},
        ],
    }
    result = generate_code(python_generator, convert_descriptor(descriptor))

    assert [f.rule for f in result.failures] == ["duplicate-identifier"]
    assert result.failures[0].method_names == ("AB", "aB")
    assert not any(path.startswith("codes_") for path in result.files)
    assert "fine_server.py" in result.files
