"""
Jinja2 wrapper used to render every page through one shared template.
"""

import logging

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError

from .errors import TemplateLoadError, TemplateRenderError


class PageUndefined(StrictUndefined):
    """Fail when an unknown slot is printed, but test as false in conditionals."""

    def __bool__(self):
        return False


class TemplateEngine:
    """Compile a page template once and render it per document."""

    def __init__(self, autoescape=True):
        self.logger = logging.getLogger('mdsite.templating')
        self.env = Environment(
            autoescape=autoescape,
            undefined=PageUndefined,
            keep_trailing_newline=True,
        )

    def load(self, template_text, name='page'):
        """Compile template source. Syntax errors are fatal."""
        try:
            return self.env.from_string(template_text)
        except TemplateSyntaxError as e:
            raise TemplateLoadError(f"Invalid template {name} (line {e.lineno}): {e.message}") from e

    def load_file(self, template_file):
        """Read and compile the template file."""
        self.logger.debug(f"Loading template: {template_file}")
        try:
            with open(template_file, 'r', encoding='utf-8') as f:
                template_text = f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            raise TemplateLoadError(f"Failed to read template file {template_file}: {e}") from e
        return self.load(template_text, name=template_file)

    def render(self, template, context, path):
        """
        Render a compiled template with a page context.

        Raises:
            TemplateRenderError: Rendering failed for the document at path.
        """
        try:
            return template.render(**context)
        except Exception as e:
            raise TemplateRenderError(path, f"Failed to render template: {e}") from e
