#!/usr/bin/env python3
"""
Command-line interface for Mdsite - Markdown to HTML site generator.
"""

import os
import sys
import argparse
from typing import List, Optional

from . import __version__
from .core import Mdsite, setup_logging
from .errors import MdsiteError
from .settings import SiteSettings

STARTER_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{{ title }}</title>
    <meta name="description" content="{{ description }}">
    {% if css %}<style>{{ css }}</style>{% endif %}
</head>
<body>
    <main>
{{ content }}
    </main>
</body>
</html>
"""

STARTER_STYLESHEET = """body {
    font-family: sans-serif;
    max-width: 42rem;
    margin: 2rem auto;
    line-height: 1.6;
}
"""

STARTER_PAGE = """---
title: Home
description: A site built with Mdsite
---

# Welcome

Edit `content/index.md`, then run `mdsite` to rebuild the site.

Pages without front matter are titled *Untitled*.
"""


def write_starter_file(path: str, text: str) -> None:
    """Write a starter file unless it already exists."""
    if os.path.exists(path):
        print(f"File already exists: {os.path.relpath(path)}")
        return
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    print(f"Created: {os.path.relpath(path)}")


def create_starter_structure(base_dir: str) -> None:
    """Create a sample template, stylesheet and content page."""
    write_starter_file(os.path.join(base_dir, 'templates', 'page.html'), STARTER_TEMPLATE)
    write_starter_file(os.path.join(base_dir, 'style.css'), STARTER_STYLESHEET)
    write_starter_file(os.path.join(base_dir, 'content', 'index.md'), STARTER_PAGE)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Mdsite - Markdown to HTML site generator')
    parser.add_argument('--config', type=str,
                        help='Configuration file (defaults to mdsite.toml, config.toml, mdsite.yml or mdsite.json)')
    parser.add_argument('--source', dest='source_dir', type=str,
                        help='Directory containing markdown files')
    parser.add_argument('--output', dest='output_dir', type=str,
                        help='Output directory for generated site')
    parser.add_argument('--template', dest='template_file', type=str,
                        help='Template used for every page')
    parser.add_argument('--css', dest='css_file', type=str,
                        help='Stylesheet inlined into pages and copied to the output root')
    parser.add_argument('--markdown-extensions', type=str,
                        help='Comma-separated mistune plugins, e.g. strikethrough,table,task_lists')
    parser.add_argument('--log-dir', type=str,
                        help='Also write a detailed log file to this directory')
    parser.add_argument('--verbose', action='store_true', default=None,
                        help='Show per-file progress on the console')
    parser.add_argument('--init', action='store_true',
                        help='Create a sample configuration file and starter content')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    settings_loader = SiteSettings()

    if args.init:
        try:
            config_path = settings_loader.create_sample_config()
            print(f"Configuration file: {os.path.relpath(config_path)}")
            create_starter_structure(settings_loader.config_dir)
        except (MdsiteError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print("\nEdit the configuration file and content, then run 'mdsite' to build your site.")
        return 0

    args_dict = {k: v for k, v in vars(args).items() if v is not None and k not in ('config', 'init')}

    try:
        settings_loader.load_settings(args.config)
        final_settings = settings_loader.merge_with_args(args_dict)
        config = settings_loader.to_site_config(final_settings)

        logger = setup_logging(verbose=config.verbose, log_dir=config.log_dir)
        if settings_loader.config_file_path:
            logger.debug(f"Loaded configuration from: {settings_loader.config_file_path}")

        generator = Mdsite.from_config(config)
        generator.build()
    except (MdsiteError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Site generated in {config.output_dir}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
