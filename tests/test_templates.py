import pytest

from rpcgen.codegen.core.templates import TemplateEngine, TemplateError, create_template_engine


@pytest.fixture
def engine():
    return create_template_engine()


def render(engine, source, **context):
    return engine.environment.from_string(source).render(**context)


class TestFilters:
    def test_naming_filters(self, engine):
        source = "{{ n|lower_camel }} {{ n|upper_camel }} {{ n|screaming_snake }} {{ n|snake_case }}"
        assert render(engine, source, n="say_hello") == "sayHello SayHello SAY_HELLO say_hello"

    def test_indent_code(self, engine):
        assert render(engine, "{{ code|indent_code(2) }}", code="a\nb\n\nc") == "a\n  b\n\n  c"
        assert render(engine, "{{ code|indent_code(2, true) }}", code="a") == "  a"

    def test_comment(self, engine):
        assert render(engine, "{{ text|comment('#') }}", text="one\n\ntwo") == "# one\n\n# two"

    def test_doc_lines(self, engine):
        assert render(engine, "{{ text|doc_lines|join(';') }}", text="a <b>\n\n") == "a &lt;b&gt;"


class TestRendering:
    def test_missing_template(self, engine):
        with pytest.raises(TemplateError, match="missing.j2"):
            engine.render_template("missing.j2", {})

    def test_undefined_variables_fail(self, tmp_path):
        (tmp_path / "t.j2").write_text("{{ nothing }}")
        engine = TemplateEngine(tmp_path)
        with pytest.raises(TemplateError):
            engine.render_template("t.j2", {})

    def test_renders_from_directory(self, tmp_path):
        (tmp_path / "t.j2").write_text("{% if on %}\n  {{ name }}\n{% endif %}\n")
        engine = TemplateEngine(tmp_path)
        assert engine.render_template("t.j2", {"on": True, "name": "x"}) == "  x\n"
