"""Frontmatter parsing for plugin asset markdown files.

Assets are authored by hand, so parsing is tolerant: a block that YAML
accepts is loaded as YAML with every scalar kept as a string, and a block
YAML rejects falls back to a line scanner that keeps whatever `key: value`
lines it can find. Only an unterminated block is a hard failure.
"""

import json
import re
from dataclasses import dataclass

import yaml

from plugin_lint.core.errors import MalformedFrontmatterError

FRONTMATTER_DELIMITER = "---"
_KEY_VALUE_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_.-]*)\s*:(?:\s+(.*))?$")
_INLINE_HASH_PATTERN = re.compile(r"(?:^|\s)#")
_STRUCTURED_VALUE_PREFIXES = ("'", '"', "[", "{", "|", ">", "&", "*", "!")


@dataclass(frozen=True)
class FrontmatterParseResult:
    """Result of splitting markdown content into frontmatter and body.

    Attributes:
        metadata: Parsed `key: value` pairs. Empty when the file has no block.
        body: Content after the closing delimiter (the whole text if no block).
        has_block: True if the file opened with a frontmatter delimiter.
    """

    metadata: dict[str, str]
    body: str
    has_block: bool


def parse_frontmatter(content: str) -> FrontmatterParseResult:
    """Split markdown content into frontmatter metadata and body.

    Args:
        content: The markdown file content.

    Returns:
        FrontmatterParseResult with metadata and body.

    Raises:
        MalformedFrontmatterError: If the opening `---` has no closing `---`.
    """
    text = content.removeprefix("\ufeff")
    lines = text.splitlines()
    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return FrontmatterParseResult(metadata={}, body=text, has_block=False)

    closing: int | None = None
    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == FRONTMATTER_DELIMITER:
            closing = idx
            break
    if closing is None:
        raise MalformedFrontmatterError("Frontmatter opened with --- but never closed")

    block = "\n".join(lines[1:closing])
    body = "\n".join(lines[closing + 1 :])
    return FrontmatterParseResult(metadata=_load_block(block), body=body, has_block=True)


def _load_block(block: str) -> dict[str, str]:
    try:
        # BaseLoader keeps scalars as authored: "1.10" stays "1.10", "yes" stays "yes"
        loaded = yaml.load(block, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        return _scan_key_values(block)

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        return _scan_key_values(block)
    metadata = {str(key): _stringify(value) for key, value in loaded.items()}
    return _restore_hash_values(metadata, block)


def _restore_hash_values(metadata: dict[str, str], block: str) -> dict[str, str]:
    """Keep plain values containing ` #` verbatim instead of as YAML comments.

    `description: Fixes issue #12` would otherwise load as "Fixes issue".
    """
    for line in block.splitlines():
        match = _KEY_VALUE_PATTERN.match(line.rstrip())
        if match is None:
            continue
        key = match.group(1)
        raw = (match.group(2) or "").strip()
        if key not in metadata or raw.startswith(_STRUCTURED_VALUE_PREFIXES):
            continue
        if _INLINE_HASH_PATTERN.search(raw):
            metadata[key] = raw
    return metadata


def _stringify(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ", ".join(_stringify(item) for item in value)
    if isinstance(value, dict):
        return yaml.dump(value, default_flow_style=True).strip()
    return str(value)


def _scan_key_values(block: str) -> dict[str, str]:
    """Collect top-level `key: value` lines, ignoring anything else."""
    metadata: dict[str, str] = {}
    for line in block.splitlines():
        match = _KEY_VALUE_PATTERN.match(line.rstrip())
        if match is None:
            continue
        key = match.group(1)
        value = _strip_quotes((match.group(2) or "").strip())
        metadata[key] = value
    return metadata


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def serialize_frontmatter(metadata: dict[str, str]) -> str:
    """Render metadata back into a delimited frontmatter block.

    Values that YAML would read differently from their literal text are
    emitted double-quoted, so parsing the output yields the same mapping.

    Args:
        metadata: Mapping of keys to string values.

    Returns:
        Frontmatter text including both `---` delimiters and a trailing newline.
    """
    lines = [FRONTMATTER_DELIMITER]
    for key, value in metadata.items():
        lines.append(f"{key}: {_render_value(key, value)}")
    lines.append(FRONTMATTER_DELIMITER)
    return "\n".join(lines) + "\n"


def _render_value(key: str, value: str) -> str:
    plain = f"{key}: {value}"
    try:
        reloaded = yaml.load(plain, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        reloaded = None
    if reloaded == {key: value}:
        return value
    # A JSON string literal is a valid YAML double-quoted scalar
    return json.dumps(value, ensure_ascii=False)
