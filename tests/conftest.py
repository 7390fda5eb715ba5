"""Test configuration and fixtures for Mdsite tests."""

import pytest
import tempfile
import shutil
import logging
from pathlib import Path

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>{{ title }}</title>
    <meta name="description" content="{{ description }}">
    {% if css %}<style>{{ css | safe }}</style>{% endif %}
</head>
<body>{{ content | safe }}</body>
</html>"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_mdsite_logger():
    """Drop handlers installed by setup_logging so each test starts clean."""
    yield
    logger = logging.getLogger('mdsite')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def mock_content_dir(temp_dir):
    """Create a mock content directory with nested markdown files."""
    content_dir = Path(temp_dir) / 'content'
    notes_dir = content_dir / 'notes'
    notes_dir.mkdir(parents=True)

    (content_dir / 'index.md').write_text("""---
title: Test Page
description: A test page
---

# Hello
This is **Markdown**.
""", encoding='utf-8')

    (notes_dir / 'a.md').write_text("# Note A\n\nNo front matter here.\n", encoding='utf-8')

    (content_dir / 'readme.txt').write_text("not markdown", encoding='utf-8')

    return str(content_dir)


@pytest.fixture
def mock_template_file(temp_dir):
    """Create the shared page template."""
    template_file = Path(temp_dir) / 'template.html'
    template_file.write_text(PAGE_TEMPLATE, encoding='utf-8')
    return str(template_file)


@pytest.fixture
def mock_css_file(temp_dir):
    """Create a site stylesheet."""
    css_file = Path(temp_dir) / 'style.css'
    css_file.write_text("body { color: blue; }", encoding='utf-8')
    return str(css_file)


@pytest.fixture
def mock_output_dir(temp_dir):
    """Path for the generated site. Not created up front."""
    return str(Path(temp_dir) / 'output')
