import os
import shutil
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import List, Optional

import mistune
from markupsafe import Markup

from .errors import (
    ConfigError,
    MetadataParseError,
    OutputDirectoryError,
    SourceDirectoryError,
    TemplateRenderError,
)
from .frontmatter import parse_metadata, split_front_matter
from .templating import TemplateEngine

MARKDOWN_SUFFIX = '.md'
HTML_SUFFIX = '.html'
STYLESHEET_NAME = 'style.css'
DEFAULT_TITLE = 'Untitled'


@dataclass(frozen=True)
class SourceDocument:
    """A Markdown file found under the content directory."""
    relative_path: str
    source_path: str

    def output_path(self, output_dir):
        """Mirror the relative path under output_dir with a .html suffix."""
        return Path(output_dir).joinpath(*PurePosixPath(self.relative_path).with_suffix(HTML_SUFFIX).parts)


@dataclass(frozen=True)
class RenderedPage:
    """Values handed to the page template for one document."""
    title: str
    description: str
    content_html: str
    css: Optional[str] = None

    def as_context(self):
        """Return template slots. css is only present when a stylesheet was loaded."""
        context = {
            'title': self.title,
            'description': self.description,
            'content': Markup(self.content_html),
        }
        if self.css is not None:
            context['css'] = Markup(self.css)
        return context


class SkipReason(Enum):
    IO_ERROR = 'io_error'
    METADATA_ERROR = 'metadata_error'
    TEMPLATE_ERROR = 'template_error'
    WRITE_ERROR = 'write_error'
    PROCESSING_ERROR = 'processing_error'


@dataclass
class PageResult:
    """Outcome of processing one document."""
    document: SourceDocument
    output_path: Optional[Path] = None
    skip_reason: Optional[SkipReason] = None
    message: str = ''

    @property
    def written(self):
        return self.skip_reason is None


@dataclass
class BuildReport:
    """Aggregate outcome of a build."""
    written: List[Path] = field(default_factory=list)
    skipped: List[PageResult] = field(default_factory=list)
    stylesheet: Optional[Path] = None
    elapsed: float = 0.0

    @property
    def pages_written(self):
        return len(self.written)

    @property
    def pages_skipped(self):
        return len(self.skipped)

    def add(self, result):
        if result.written:
            self.written.append(result.output_path)
        else:
            self.skipped.append(result)


def create_markdown_parser(extensions=None):
    """Create a Mistune markdown parser that passes raw HTML through."""
    return mistune.create_markdown(
        renderer=mistune.HTMLRenderer(escape=False),
        plugins=list(extensions or [])
    )


def build_page_context(metadata, content_html, css=None):
    """Combine parsed metadata, rendered HTML and site CSS into a RenderedPage."""
    if metadata is None:
        return RenderedPage(title=DEFAULT_TITLE, description='', content_html=content_html, css=css)
    return RenderedPage(
        title=metadata.title,
        description=metadata.description,
        content_html=content_html,
        css=css
    )


def walk_markdown_files(source_dir):
    """
    Yield a SourceDocument for every .md file under source_dir.

    Directories are visited in sorted order. Unreadable directories and
    broken links are logged and skipped.
    """
    logger = logging.getLogger('mdsite.walker')
    if not os.path.isdir(source_dir):
        raise SourceDirectoryError(f"Content directory not found: {source_dir}")

    def on_error(error):
        logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")

    for dirpath, dirnames, filenames in os.walk(source_dir, onerror=on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1] != MARKDOWN_SUFFIX:
                continue
            source_path = os.path.join(dirpath, filename)
            if not os.path.isfile(source_path):
                logger.warning(f"Skipping broken or special entry: {source_path}")
                continue
            relative_path = Path(os.path.relpath(source_path, source_dir)).as_posix()
            yield SourceDocument(relative_path=relative_path, source_path=source_path)


class FileProcessor:
    def __init__(self, output_dir, template, template_engine, css=None, markdown_extensions=None):
        self.output_dir = output_dir
        self.template = template
        self.template_engine = template_engine
        self.css = css
        self.logger = logging.getLogger('mdsite.processor')
        self.markdown_parser = create_markdown_parser(markdown_extensions)

    def markdown_filter(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text)

    def parse_markdown_with_metadata(self, text, path):
        """Split front matter from the body and parse it when present."""
        block, markdown_content = split_front_matter(text)
        metadata = parse_metadata(block, path) if block is not None else None
        return metadata, markdown_content

    def render_page(self, text, path):
        """Turn document text into a complete HTML page."""
        metadata, markdown_content = self.parse_markdown_with_metadata(text, path)
        html_content = self.markdown_filter(markdown_content)
        page = build_page_context(metadata, html_content, self.css)
        return self.template_engine.render(self.template, page.as_context(), path)

    def skip(self, document, reason, message):
        self.logger.error(f"Skipping {document.source_path}: {message}")
        return PageResult(document=document, skip_reason=reason, message=message)

    def process(self, document):
        """Process a single markdown file."""
        self.logger.info(f"Processing Markdown file: {document.source_path}")
        try:
            with open(document.source_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            return self.skip(document, SkipReason.IO_ERROR, f"Failed to read file: {e}")

        try:
            html = self.render_page(text, document.source_path)
        except MetadataParseError as e:
            return self.skip(document, SkipReason.METADATA_ERROR, e.diagnostic)
        except TemplateRenderError as e:
            return self.skip(document, SkipReason.TEMPLATE_ERROR, e.diagnostic)

        output_path = document.output_path(self.output_dir)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as output_file:
                output_file.write(html)
        except (IOError, OSError) as e:
            return self.skip(document, SkipReason.WRITE_ERROR, f"Failed to write {output_path}: {e}")

        self.logger.debug(f"Generated HTML: {output_path}")
        return PageResult(document=document, output_path=output_path)


class InfoFilter(logging.Filter):
    """Filter to allow only warnings, errors and build summary messages in the console."""
    allowed_messages = [
        "Site build completed in",
        "Pages written:",
        "Pages skipped:",
        "Copied stylesheet",
    ]

    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        return any(msg in record.getMessage() for msg in self.allowed_messages)


def setup_logging(verbose=False, log_dir=None):
    """Set up logging configuration for the mdsite logger tree."""
    logger = logging.getLogger('mdsite')
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        if not verbose:
            console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('mdsite_%Y-%m-%d_%H-%M-%S.log')
            file_handler = logging.FileHandler(os.path.join(log_dir, log_filename), encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(file_handler)

    return logger


class Mdsite:
    def __init__(self, source_dir, output_dir, template_file, css_file=None, markdown_extensions=None):
        self.source_dir = source_dir
        self.output_dir = output_dir
        self.template_file = template_file
        self.css_file = css_file
        self.markdown_extensions = list(markdown_extensions or [])
        self.logger = logging.getLogger('mdsite')

        self.check_markdown_extensions()
        self.template_engine = TemplateEngine()
        self.template = self.template_engine.load_file(self.template_file)
        self.css = self.load_css()

    def check_markdown_extensions(self):
        """Fail early when a configured mistune plugin does not exist."""
        try:
            create_markdown_parser(self.markdown_extensions)
        except (ImportError, AttributeError, KeyError, ValueError) as e:
            raise ConfigError(f"Unknown markdown extension in {self.markdown_extensions}: {e}") from e

    @classmethod
    def from_config(cls, config):
        """Create a generator from a SiteConfig."""
        return cls(
            source_dir=config.source_dir,
            output_dir=config.output_dir,
            template_file=config.template_file,
            css_file=config.css_file,
            markdown_extensions=config.markdown_extensions
        )

    def load_css(self):
        """Read the site stylesheet. A missing or unreadable file means no CSS."""
        if not self.css_file:
            return None
        self.logger.debug(f"Reading CSS file: {self.css_file}")
        try:
            with open(self.css_file, 'r', encoding='utf-8') as f:
                return f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            self.logger.warning(f"Failed to read CSS file {self.css_file}, continuing without styles: {e}")
            return None

    def create_output_dir(self):
        """Create the output root. Failure here aborts the build."""
        self.logger.debug(f"Creating output directory: {self.output_dir}")
        try:
            os.makedirs(self.output_dir, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(f"Failed to create output directory {self.output_dir}: {e}") from e
        if not os.access(self.output_dir, os.W_OK):
            raise OutputDirectoryError(f"Output directory is not writable: {self.output_dir}")

    def copy_stylesheet(self):
        """Copy the configured CSS file to the output root as style.css."""
        if not self.css_file:
            return None
        css_output = os.path.join(self.output_dir, STYLESHEET_NAME)
        try:
            shutil.copyfile(self.css_file, css_output)
        except (IOError, OSError) as e:
            self.logger.error(f"Failed to copy CSS from {self.css_file} to {css_output}: {e}")
            return None
        self.logger.info(f"Copied stylesheet to {css_output}")
        return Path(css_output)

    def build_pages(self, report):
        """Process every document in walk order, one at a time."""
        processor = FileProcessor(
            self.output_dir, self.template, self.template_engine,
            css=self.css, markdown_extensions=self.markdown_extensions
        )
        documents = 0
        for document in walk_markdown_files(self.source_dir):
            documents += 1
            try:
                result = processor.process(document)
            except Exception as e:
                result = processor.skip(document, SkipReason.PROCESSING_ERROR, f"Error processing file: {e}")
            report.add(result)
        if not documents:
            self.logger.warning(f"No markdown files found in {self.source_dir}")

    def build(self):
        """Main build process."""
        start_time = time.time()
        report = BuildReport()
        self.logger.info("Starting site build...")

        if not os.path.isdir(self.source_dir):
            raise SourceDirectoryError(f"Content directory not found: {self.source_dir}")
        self.create_output_dir()
        self.build_pages(report)
        report.stylesheet = self.copy_stylesheet()

        report.elapsed = time.time() - start_time
        self.logger.info(f"Site build completed in {report.elapsed:.6f} seconds.")
        self.logger.info(f"Pages written: {report.pages_written}")
        self.logger.info(f"Pages skipped: {report.pages_skipped}")
        for result in report.skipped:
            self.logger.debug(f"  {result.document.relative_path} ({result.skip_reason.value}): {result.message}")
        return report
