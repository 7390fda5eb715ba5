"""
Front matter handling for Mdsite.

A document may open with a YAML block:

    ---
    title: Home
    description: Landing page
    ---

    # Body starts here

split_front_matter() separates the block from the body and parse_metadata()
turns the block into a PageMetadata record.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import yaml

from .errors import MetadataParseError

OPENING_DELIMITER = '---\n'
CLOSING_DELIMITER = '\n---\n'


@dataclass(frozen=True)
class PageMetadata:
    """Metadata declared in a document's front matter."""
    title: str
    description: str = ''


class UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that refuses repeated keys and keeps numbers, booleans and dates as text."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                if not isinstance(key_node, yaml.ScalarNode):
                    continue
                key = self.construct_object(key_node, deep=deep)
                if key in seen:
                    raise yaml.constructor.ConstructorError(
                        'while constructing a mapping', node.start_mark,
                        f'found duplicate key {key!r}', key_node.start_mark
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)

    def construct_plain_text(self, node):
        return self.construct_scalar(node)


# Numbers, booleans and dates keep their literal text so `title: 404` stays "404".
for _tag in ('bool', 'int', 'float', 'timestamp'):
    UniqueKeyLoader.add_constructor(f'tag:yaml.org,2002:{_tag}', UniqueKeyLoader.construct_plain_text)


def split_front_matter(text: str) -> Tuple[Optional[str], str]:
    """
    Split a document into its raw front matter block and Markdown body.

    Args:
        text: Full text of one document.

    Returns:
        (block, body). block is None when the document does not start with
        the opening delimiter or the closing delimiter is missing; body is
        then the unchanged text.
    """
    if not text.startswith(OPENING_DELIMITER):
        return None, text

    # Start at the newline ending the opening line so an empty block matches.
    search_from = len(OPENING_DELIMITER) - 1
    end = text.find(CLOSING_DELIMITER, search_from)
    if end == -1:
        return None, text

    block = text[len(OPENING_DELIMITER):max(end, len(OPENING_DELIMITER))]
    body = text[end + len(CLOSING_DELIMITER):]
    if body.startswith('\n'):
        body = body[1:]
    return block, body


def parse_metadata(block: str, path) -> PageMetadata:
    """
    Parse a raw front matter block into PageMetadata.

    Args:
        block: Text between the front matter delimiters.
        path: Source document path, used for error reporting.

    Returns:
        PageMetadata with description defaulting to an empty string.

    Raises:
        MetadataParseError: If the block is not a YAML mapping, repeats a
            key, lacks a string title or has a non-string description.
    """
    try:
        data = yaml.load(block, Loader=UniqueKeyLoader)
    except yaml.YAMLError as e:
        raise MetadataParseError(path, f"Invalid YAML front matter: {e}") from e

    if not isinstance(data, dict):
        raise MetadataParseError(path, "Front matter must be a mapping with a 'title' key")

    title = data.get('title')
    if title is None:
        raise MetadataParseError(path, "Front matter is missing required key 'title'")
    if not isinstance(title, str):
        raise MetadataParseError(path, f"'title' must be a string, got {type(title).__name__}")

    description = data.get('description')
    if description is None:
        description = ''
    elif not isinstance(description, str):
        raise MetadataParseError(path, f"'description' must be a string, got {type(description).__name__}")

    return PageMetadata(title=title, description=description)
