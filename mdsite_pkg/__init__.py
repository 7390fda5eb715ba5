"""
Mdsite - A small Markdown to HTML site generator.

Mdsite walks a directory of Markdown documents with optional YAML front
matter and renders each one through a single Jinja2 template, writing a
parallel tree of HTML pages.
"""

__version__ = "1.0.0"

from .core import Mdsite, FileProcessor

__all__ = ['Mdsite', 'FileProcessor']
