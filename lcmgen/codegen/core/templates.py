"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with the indentation and comment filters used by the backend templates.
"""

from typing import Dict, Any, Optional
from pathlib import Path

from jinja2 import DictLoader, Environment, FileSystemLoader, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError


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
        """Setup Jinja2 environment with code generation utilities."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            # Use in-memory templates
            loader = DictLoader({})

        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        # Add custom filters for code generation
        self._env.filters["indent_lines"] = self._indent_filter
        self._env.filters["comment"] = self._comment_filter

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

    @staticmethod
    def _indent_filter(value: Any, prefix: str = "    ") -> str:
        """Indent every non-blank line of a line list or block of text."""
        lines = value if isinstance(value, (list, tuple)) else str(value).split("\n")
        return "\n".join(prefix + line if line.strip() else "" for line in lines)

    @staticmethod
    def _comment_filter(value: str, style: str = "//") -> str:
        """Add comment markers to each line."""
        lines = str(value).split("\n")
        return "\n".join(f"{style} {line}" if line.strip() else style for line in lines)


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine for ``template_dir`` (in-memory if None)."""
    return TemplateEngine(template_dir)
