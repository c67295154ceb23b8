"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with filters for the identifier casings and doc comments.
"""

from typing import Dict, Any, Optional
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    DictLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
)

from .docs import doc_comment_body, doc_lines, python_doc_lines
from .naming import to_lower_camel, to_screaming_snake, to_snake_case, to_upper_camel


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation filters."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            # In-memory templates only
            loader = DictLoader({})

        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        self._env.filters["lower_camel"] = to_lower_camel
        self._env.filters["upper_camel"] = to_upper_camel
        self._env.filters["screaming_snake"] = to_screaming_snake
        self._env.filters["snake_case"] = to_snake_case
        self._env.filters["doc_lines"] = doc_lines
        self._env.filters["doc_comment"] = doc_comment_body
        self._env.filters["py_doc_lines"] = python_doc_lines
        self._env.filters["indent_code"] = self._indent_filter
        self._env.filters["comment"] = self._comment_filter

    @property
    def environment(self) -> Environment:
        return self._env

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    # Template filters for code generation

    def _indent_filter(self, value: str, spaces: int = 4, first: bool = False) -> str:
        """Indent all non-blank lines in a string."""
        indent = " " * spaces
        lines = str(value).split("\n")
        return "\n".join(
            indent + line if line.strip() and (first or i > 0) else line
            for i, line in enumerate(lines)
        )

    def _comment_filter(self, value: str, style: str = "//") -> str:
        """Add comment markers to each line."""
        lines = str(value).split("\n")
        return "\n".join(f"{style} {line}" if line.strip() else line for line in lines)


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, optionally bound to a template directory."""
    return TemplateEngine(template_dir)
