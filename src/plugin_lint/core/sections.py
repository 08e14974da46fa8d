"""Split a markdown body into heading-delimited sections."""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from plugin_lint.core.models import Section

_HEADING_PATTERN = re.compile(r"^(#{1,6}) +(.+?)(?:\s+#+)?\s*$")
_FENCE_PATTERN = re.compile(r"^\s{0,3}(```|~~~)")


@dataclass(frozen=True)
class DuplicateHeading:
    """A heading that repeats the text of an earlier sibling heading."""

    heading: str
    level: int


@dataclass(frozen=True)
class SectionExtraction:
    """Result of splitting a body into sections.

    Attributes:
        preamble: Text before the first heading.
        sections: All sections in document order, nested ones included.
        duplicates: Sibling headings that repeat earlier heading text.
    """

    preamble: str
    sections: tuple[Section, ...]
    duplicates: tuple[DuplicateHeading, ...]


@dataclass(frozen=True)
class _Heading:
    line_index: int
    level: int
    text: str


def _mark_code(lines: list[str]) -> Iterator[tuple[str, bool]]:
    """Yield each line with a flag telling whether it belongs to a fenced block."""
    fence: str | None = None
    for line in lines:
        fence_match = _FENCE_PATTERN.match(line)
        if fence_match is not None:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif fence == marker:
                fence = None
            yield line, True
            continue
        yield line, fence is not None


def _find_headings(lines: list[str]) -> list[_Heading]:
    headings: list[_Heading] = []
    for idx, (line, is_code) in enumerate(_mark_code(lines)):
        if is_code:
            continue
        match = _HEADING_PATTERN.match(line)
        if match is not None:
            headings.append(
                _Heading(line_index=idx, level=len(match.group(1)), text=match.group(2))
            )
    return headings


def extract_sections(body: str) -> SectionExtraction:
    """Split markdown body text into sections.

    A heading line (one to six `#` followed by a space) starts a section whose
    level is the number of `#` characters. The section runs until the next
    heading at the same or a shallower level, so parent sections include the
    text of their children. Headings inside fenced code blocks are ignored.

    Args:
        body: Markdown body text (frontmatter already removed).

    Returns:
        SectionExtraction with preamble, ordered sections and duplicates.
    """
    lines = body.splitlines()
    headings = _find_headings(lines)
    if not headings:
        return SectionExtraction(preamble=body.strip("\n"), sections=(), duplicates=())

    preamble = "\n".join(lines[: headings[0].line_index]).strip("\n")
    sections: list[Section] = []
    for position, heading in enumerate(headings):
        end = len(lines)
        for later in headings[position + 1 :]:
            if later.level <= heading.level:
                end = later.line_index
                break
        content = "\n".join(lines[heading.line_index + 1 : end]).strip("\n")
        sections.append(Section(heading=heading.text, level=heading.level, content=content))

    return SectionExtraction(
        preamble=preamble,
        sections=tuple(sections),
        duplicates=tuple(_find_duplicates(headings)),
    )


def _find_duplicates(headings: list[_Heading]) -> list[DuplicateHeading]:
    """Find headings whose text repeats an earlier sibling's text.

    Siblings share a level and the same parent heading. At the top level this
    means the whole document.
    """
    duplicates: list[DuplicateHeading] = []
    # Open ancestors as (level, child texts seen so far, keyed by child level)
    stack: list[tuple[int, dict[int, set[str]]]] = [(0, {})]
    for heading in headings:
        while stack[-1][0] >= heading.level:
            stack.pop()
        seen = stack[-1][1].setdefault(heading.level, set())
        if heading.text in seen:
            duplicates.append(DuplicateHeading(heading=heading.text, level=heading.level))
        else:
            seen.add(heading.text)
        stack.append((heading.level, {}))
    return duplicates


def find_section(
    sections: tuple[Section, ...], heading: str, *, expected_level: int = 2
) -> Section | None:
    """Find the first section with exactly this heading text.

    Matching is case-sensitive and tolerates a heading level one deeper or one
    shallower than `expected_level`.
    """
    for section in sections:
        if section.heading == heading and abs(section.level - expected_level) <= 1:
            return section
    return None


def child_sections(sections: tuple[Section, ...], parent: Section) -> list[Section]:
    """Return all sections nested under `parent`, in document order.

    Args:
        sections: All sections of the document, as returned by extract_sections.
        parent: A section from `sections`.

    Returns:
        Sections that follow `parent` until the next section at its level or above.
    """
    start = next(idx for idx, section in enumerate(sections) if section is parent)
    children: list[Section] = []
    for section in sections[start + 1 :]:
        if section.level <= parent.level:
            break
        children.append(section)
    return children


def prose_lines(text: str) -> list[str]:
    """Return the lines of `text` that are not inside fenced code blocks."""
    return [line for line, is_code in _mark_code(text.splitlines()) if not is_code]


def own_content(section: Section) -> str:
    """Return a section's text up to its first nested heading."""
    lines: list[str] = []
    for line, is_code in _mark_code(section.content.splitlines()):
        if not is_code and _HEADING_PATTERN.match(line):
            break
        lines.append(line)
    return "\n".join(lines).strip("\n")


def labelled_values(text: str, label: str) -> list[str]:
    """Find inline `Label: value` lines and return their values.

    Accepts bold or underscore emphasis around the label and an optional
    leading bullet, e.g. `- **Trigger Keywords**: api, http`. Lines inside
    fenced code blocks are skipped.

    Returns:
        Text after the colon for each matching line (possibly empty strings).
    """
    pattern = re.compile(
        rf"^\s*(?:[-*+]\s+)?(?:\*\*|__)?{re.escape(label)}(?:\*\*|__)?\s*:(?:\*\*|__)?(.*)$"
    )
    values: list[str] = []
    for line, is_code in _mark_code(text.splitlines()):
        if is_code:
            continue
        match = pattern.match(line)
        if match is not None:
            values.append(match.group(1).strip())
    return values
