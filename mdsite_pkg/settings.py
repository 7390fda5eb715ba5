#!/usr/bin/env python3
"""
Settings loader for Mdsite static site generator.
Supports configuration from mdsite.toml, config.toml, mdsite.yml, mdsite.yaml
or mdsite.json files.
"""

import os
import json
import tomllib
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

import yaml

from .errors import ConfigError


@dataclass(frozen=True)
class SiteConfig:
    """Resolved, read-only build configuration."""
    source_dir: str
    output_dir: str
    template_file: str
    css_file: Optional[str] = None
    markdown_extensions: List[str] = field(default_factory=list)
    log_dir: Optional[str] = None
    verbose: bool = False


class SiteSettings:
    """Load and manage Mdsite configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'source_dir': None,
        'output_dir': None,
        'template_file': None,
        'css_file': None,
        'markdown_extensions': [],
        'log_dir': None,
        'verbose': False
    }

    REQUIRED_SETTINGS = ['source_dir', 'output_dir', 'template_file']

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['mdsite.toml', 'config.toml', 'mdsite.yml', 'mdsite.yaml', 'mdsite.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = dict(self.DEFAULT_SETTINGS)
        self.config_file_path = None
        self.arg_keys = set()

    def load_settings(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load settings from a configuration file.

        Args:
            config_path: Explicit file to load. When omitted the first of
                CONFIG_FILES found in config_dir is used, if any.

        Returns:
            Dictionary of configuration settings

        Raises:
            ConfigError: If the file cannot be read or parsed.
        """
        config_file = config_path or self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if not isinstance(loaded_settings, dict):
                raise ConfigError(f"Configuration file {config_file} must contain a mapping")
            self.settings.update(loaded_settings)

        return dict(self.settings)

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            if file_ext == '.toml':
                with open(config_path, 'rb') as f:
                    return tomllib.load(f)
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    return json.load(f) or {}
                else:
                    raise ConfigError(f"Unsupported config file format: {file_ext}")
        except FileNotFoundError as e:
            raise ConfigError(f"Configuration file not found: {config_path}") from e
        except PermissionError as e:
            raise ConfigError(f"Permission denied reading configuration file: {config_path}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in configuration file {config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file {config_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {config_path}: {e}") from e
        except (IOError, OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Error reading configuration file {config_path}: {e}") from e

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = dict(self.settings)

        for key, value in args_dict.items():
            if value is not None:
                merged[key] = value
                self.arg_keys.add(key)

        return merged

    def to_site_config(self, settings: Dict[str, Any]) -> SiteConfig:
        """
        Validate merged settings and freeze them into a SiteConfig.

        Relative paths from command-line arguments are resolved against the
        working directory. Relative paths from the config file are resolved
        against its directory, or config_dir when no file was loaded.

        Raises:
            ConfigError: If a required setting is missing or malformed.
        """
        missing = [key for key in self.REQUIRED_SETTINGS if not settings.get(key)]
        if missing:
            raise ConfigError(f"Missing required setting(s): {', '.join(missing)}")

        for key in self.REQUIRED_SETTINGS + ['css_file', 'log_dir']:
            value = settings.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"Setting '{key}' must be a string")

        return SiteConfig(
            source_dir=self._resolve_path(settings['source_dir'], 'source_dir'),
            output_dir=self._resolve_path(settings['output_dir'], 'output_dir'),
            template_file=self._resolve_path(settings['template_file'], 'template_file'),
            css_file=self._resolve_path(settings.get('css_file'), 'css_file'),
            markdown_extensions=parse_extensions(settings.get('markdown_extensions')),
            log_dir=self._resolve_path(settings.get('log_dir'), 'log_dir'),
            verbose=bool(settings.get('verbose'))
        )

    def _resolve_path(self, value: Optional[str], key: str) -> Optional[str]:
        if not value:
            return None
        value = os.path.expanduser(value)
        if os.path.isabs(value):
            return value
        if key in self.arg_keys:
            base_dir = os.getcwd()
        elif self.config_file_path:
            base_dir = os.path.dirname(os.path.abspath(self.config_file_path))
        else:
            base_dir = self.config_dir
        return os.path.join(base_dir, value)

    def create_sample_config(self) -> str:
        """
        Create a sample mdsite.toml configuration file.

        Returns:
            Path to created sample config file
        """
        config_path = os.path.join(self.config_dir, 'mdsite.toml')
        if os.path.exists(config_path):
            return config_path

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write("# Mdsite Configuration File\n\n")
                f.write("# Directory holding the Markdown sources\n")
                f.write('source_dir = "content"\n\n')
                f.write("# Generated HTML is written here, mirroring source_dir\n")
                f.write('output_dir = "output"\n\n')
                f.write("# Jinja2 template used for every page\n")
                f.write('template_file = "templates/page.html"\n\n')
                f.write("# Optional stylesheet, inlined as {{ css }} and copied to output/style.css\n")
                f.write('css_file = "style.css"\n\n')
                f.write("# Optional mistune plugins: strikethrough, table, task_lists\n")
                f.write("markdown_extensions = []\n")
        except (IOError, OSError) as e:
            raise ConfigError(f"Error writing configuration file {config_path}: {e}") from e

        return config_path


def parse_extensions(value: Any) -> List[str]:
    """Accept a list or a comma-separated string of markdown plugin names."""
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')
    if not isinstance(value, (list, tuple)):
        raise ConfigError("Setting 'markdown_extensions' must be a list or comma-separated string")
    return [str(name).strip() for name in value if str(name).strip()]
