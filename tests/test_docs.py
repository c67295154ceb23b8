from rpcgen.codegen.core.docs import (
    doc_comment_body,
    doc_lines,
    escape_doc_comment,
    python_doc_lines,
)


class TestEscaping:
    def test_comment_terminator_is_broken(self):
        assert "*/" not in escape_doc_comment("ends here */ oops")
        assert escape_doc_comment("a */ b") == "a *&#47; b"

    def test_comment_opener_is_broken(self):
        assert escape_doc_comment("x /* y") == "x /&#42; y"

    def test_leading_slash_counts_as_after_star(self):
        assert escape_doc_comment("/x") == "&#47;x"

    def test_markup_characters(self):
        assert escape_doc_comment("@see <b> & \\u") == "&#64;see &lt;b&gt; &amp; &#92;u"


class TestDocLines:
    def test_empty(self):
        assert doc_lines("") == []
        assert doc_comment_body("") == []

    def test_empty_fragments_are_dropped(self):
        assert doc_lines(" first\n\n second\n") == [" first", " second"]

    def test_body_prefix_and_pre(self):
        assert doc_comment_body(" Greets.\n", pre=True) == [
            " * <pre>",
            " * Greets.",
            " * </pre>",
        ]

    def test_python_doc_lines_defuse_quotes(self):
        assert python_doc_lines('\n Say """hi"""\n\n') == [' Say \\"\\"\\"hi\\"\\"\\"']
