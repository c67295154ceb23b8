"""
Doc-comment helpers.

Free-form schema comments end up inside generated block comments, so any
sequence that could close the comment or be read as markup is escaped.
"""

from typing import List

_ALWAYS_ESCAPED = {
    # Starts doc tags such as @deprecated
    "@": "&#64;",
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    # Java reads unicode escapes anywhere in the source
    "\\": "&#92;",
}


def escape_doc_comment(text: str) -> str:
    """Escape a comment for embedding inside ``/** ... */``."""
    result = []
    prev = "*"
    for ch in text:
        if ch == "*" and prev == "/":
            result.append("&#42;")
        elif ch == "/" and prev == "*":
            result.append("&#47;")
        else:
            result.append(_ALWAYS_ESCAPED.get(ch, ch))
        prev = ch
    return "".join(result)


def doc_lines(comments: str) -> List[str]:
    """
    Escaped comment lines ready to be prefixed with `` *``.

    Empty fragments between consecutive newlines are dropped, as are
    trailing empty lines.
    """
    if not comments:
        return []
    lines = [line for line in escape_doc_comment(comments).split("\n") if line]
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def doc_comment_body(comments: str, pre: bool = False) -> List[str]:
    """Lines of a block-comment body, optionally wrapped in ``<pre>``."""
    lines = doc_lines(comments)
    if not lines:
        return []
    # A line starting with "/" right after "*" would close the comment
    body = [f" * {line}" if line.startswith("/") else f" *{line}" for line in lines]
    if pre:
        body = [" * <pre>"] + body + [" * </pre>"]
    return body


def python_doc_lines(comments: str) -> List[str]:
    """Comment lines for a Python docstring, with triple quotes defused."""
    if not comments:
        return []
    text = comments.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    lines = [line.rstrip() for line in text.split("\n")]
    while lines and not lines[-1]:
        lines.pop()
    while lines and not lines[0]:
        lines.pop(0)
    return lines
