"""
Exception types raised by Mdsite.

Fatal errors abort the whole build. DocumentError subclasses are scoped to a
single source file and are turned into a logged skip by the build loop.
"""


class MdsiteError(Exception):
    """Base class for every error raised by Mdsite."""


class ConfigError(MdsiteError):
    """Configuration file missing, unreadable, invalid or incomplete."""


class TemplateLoadError(MdsiteError):
    """The page template could not be read or compiled."""


class SourceDirectoryError(MdsiteError):
    """The content directory does not exist."""


class OutputDirectoryError(MdsiteError):
    """The output root could not be created."""


class DocumentError(MdsiteError):
    """An error tied to one source document."""

    def __init__(self, path, diagnostic):
        self.path = str(path)
        self.diagnostic = str(diagnostic)
        super().__init__(f"{self.path}: {self.diagnostic}")


class MetadataParseError(DocumentError):
    """The front matter block exists but is not valid page metadata."""


class TemplateRenderError(DocumentError):
    """The template failed to render for one document."""
