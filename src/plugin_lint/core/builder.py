"""Build typed asset records from parsed documents.

Skill references live inside prose, so every name-extraction rule in this
module funnels through `extract_skill_names`. The rest of the pipeline only
sees already-structured sets.
"""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from plugin_lint.core.models import (
    Agent,
    Asset,
    AssetKind,
    Command,
    RawDocument,
    Section,
    Skill,
)
from plugin_lint.core.sections import (
    child_sections,
    find_section,
    labelled_values,
    own_content,
    prose_lines,
)

SKILL_ENTRY_POINT = "SKILL.md"

SKILLS_INVOKED_LABEL = "Skills Invoked"
SPECIALIZED_WORKFLOWS_HEADING = "Specialized Workflows"
SKILLS_INTEGRATION_HEADING = "Skills Integration"
WORKFLOW_HEADING_PREFIX = "Workflow:"
TRIGGER_KEYWORDS_HEADING = "Trigger Keywords"
AGENT_INTEGRATION_HEADING = "Agent Integration"

_BACKTICK_PATTERN = re.compile(r"`([^`]+)`")
_BUCKET_LABEL_PATTERN = re.compile(
    r"^\s*(?:[-*+]\s+)?(?:\*\*|__)?(primary|secondary)(?:\s+skills?)?(?:\*\*|__)?\s*:"
    r"(?:\*\*|__)?(.*)$",
    re.IGNORECASE,
)
_BULLET_NAME_PATTERN = re.compile(
    r"^\s*(?:[-*+]|\d+\.)\s+(?:`([^`]+)`|(?:\*\*)?([A-Za-z0-9][A-Za-z0-9_.-]*)(?:\*\*)?"
    r"(?=\s*(?:$|[-:(–—])))"
)
_BULLET_ITEM_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+\.)\s+(.*)$")
_NO_SKILLS = {"none", "n/a", "-"}


@dataclass(frozen=True)
class AssetRoots:
    """The three directories that designate asset kinds.

    Paths are POSIX paths relative to the scan root. An empty string means
    the scan root itself.
    """

    commands: str
    agents: str
    skills: str

    def items(self) -> list[tuple[AssetKind, str]]:
        return [
            (AssetKind.COMMAND, self.commands),
            (AssetKind.AGENT, self.agents),
            (AssetKind.SKILL, self.skills),
        ]


def _is_under(path: str, root: str) -> bool:
    if root in ("", "."):
        return True
    return PurePosixPath(path).is_relative_to(PurePosixPath(root))


def infer_kind(path: str, roots: AssetRoots) -> AssetKind | None:
    """Decide an asset's kind from the root directory containing it.

    When roots are nested, the deepest containing root wins.

    Args:
        path: POSIX path relative to the scan root.
        roots: Configured asset roots.

    Returns:
        The asset kind, or None if the path is outside every root.
    """
    best: tuple[int, AssetKind] | None = None
    for kind, root in roots.items():
        if not _is_under(path, root):
            continue
        depth = 0 if root in ("", ".") else len(PurePosixPath(root).parts)
        if best is None or depth > best[0]:
            best = (depth, kind)
    return best[1] if best is not None else None


def extract_skill_names(text: str) -> set[str]:
    """Turn the text after a skills label into a set of skill names.

    Backticked tokens win when present (`type-safety`, `async-patterns`).
    Otherwise the text is split on commas and the first word of each item
    is taken. "none" and "n/a" mean no skills.
    """
    backticked = [name.strip() for name in _BACKTICK_PATTERN.findall(text)]
    if backticked:
        return {name for name in backticked if name and name.lower() not in _NO_SKILLS}

    names: set[str] = set()
    for item in text.split(","):
        cleaned = item.strip().strip("*_'\"").strip()
        if not cleaned:
            continue
        word = re.split(r"[\s(]", cleaned, maxsplit=1)[0].rstrip(".;:")
        if word and word.lower() not in _NO_SKILLS:
            names.add(word)
    return names


def _fallback_name(path: str) -> str:
    posix = PurePosixPath(path)
    if posix.name == SKILL_ENTRY_POINT and posix.parent.name:
        return posix.parent.name
    return posix.stem


def command_name(path: str, commands_root: str) -> str:
    """Name a command by its path under the commands root.

    Namespaced commands join directories with ":", so `erk/plan.md` is
    `erk:plan`.
    """
    posix = PurePosixPath(path)
    if commands_root not in ("", "."):
        posix = posix.relative_to(PurePosixPath(commands_root))
    return ":".join([*posix.parent.parts, posix.stem])


def _collect_skills_invoked(sections: tuple[Section, ...]) -> set[str]:
    names: set[str] = set()
    for section in sections:
        for value in labelled_values(own_content(section), SKILLS_INVOKED_LABEL):
            names |= extract_skill_names(value)
    return names


def _collect_integration_buckets(section: Section | None) -> tuple[set[str], set[str]]:
    """Split the Skills Integration section into primary and secondary names."""
    primary: set[str] = set()
    secondary: set[str] = set()
    if section is None:
        return primary, secondary

    bucket: set[str] | None = None
    for line in prose_lines(section.content):
        stripped = line.strip()
        if stripped.startswith("#"):
            lowered = stripped.lower()
            if "primary" in lowered:
                bucket = primary
            elif "secondary" in lowered:
                bucket = secondary
            else:
                bucket = None
            continue

        label_match = _BUCKET_LABEL_PATTERN.match(line)
        if label_match is not None:
            bucket = primary if label_match.group(1).lower() == "primary" else secondary
            bucket |= extract_skill_names(label_match.group(2))
            continue

        if bucket is None:
            continue
        bullet_match = _BULLET_NAME_PATTERN.match(line)
        if bullet_match is not None:
            name = (bullet_match.group(1) or bullet_match.group(2)).strip()
            if name and name.lower() not in _NO_SKILLS:
                bucket.add(name)
    return primary, secondary


def _collect_workflows(sections: tuple[Section, ...]) -> list[tuple[str, bool]]:
    parent = find_section(sections, SPECIALIZED_WORKFLOWS_HEADING)
    if parent is None:
        return []
    workflows: list[tuple[str, bool]] = []
    for child in child_sections(sections, parent):
        if not child.heading.startswith(WORKFLOW_HEADING_PREFIX):
            continue
        has_skills = bool(labelled_values(child.content, SKILLS_INVOKED_LABEL))
        workflows.append((child.heading, has_skills))
    return workflows


def _split_keywords(text: str) -> set[str]:
    keywords: set[str] = set()
    for item in text.split(","):
        cleaned = item.strip().strip("`*_'\"").strip()
        if cleaned:
            keywords.add(cleaned)
    return keywords


def _collect_trigger_keywords(sections: tuple[Section, ...], body: str) -> set[str]:
    keywords: set[str] = set()
    section = find_section(sections, TRIGGER_KEYWORDS_HEADING)
    if section is not None:
        for line in prose_lines(section.content):
            item_match = _BULLET_ITEM_PATTERN.match(line)
            if item_match is not None:
                keywords |= _split_keywords(item_match.group(1))
            else:
                keywords.update(token.strip() for token in _BACKTICK_PATTERN.findall(line))
    for value in labelled_values(body, TRIGGER_KEYWORDS_HEADING):
        keywords |= _split_keywords(value)
    return keywords


def _collect_agent_integration(sections: tuple[Section, ...], body: str) -> set[str]:
    agents: set[str] = set()
    section = find_section(sections, AGENT_INTEGRATION_HEADING)
    if section is not None:
        for line in prose_lines(section.content):
            bullet_match = _BULLET_NAME_PATTERN.match(line)
            if bullet_match is not None:
                agents.add((bullet_match.group(1) or bullet_match.group(2)).strip())
            else:
                agents.update(name.strip() for name in _BACKTICK_PATTERN.findall(line))
    for value in labelled_values(body, AGENT_INTEGRATION_HEADING):
        agents |= extract_skill_names(value)
    return {name for name in agents if name}


def build_asset(
    document: RawDocument,
    sections: tuple[Section, ...],
    kind: AssetKind,
    roots: AssetRoots,
    *,
    parse_failed: bool = False,
) -> Asset:
    """Convert a parsed document into a typed asset record.

    Args:
        document: The parsed source file.
        sections: Sections extracted from the document body.
        kind: Asset kind, usually from infer_kind().
        roots: Configured asset roots (used to name commands).
        parse_failed: True if a parse-level error was already recorded.

    Returns:
        A Command, Agent or Skill.
    """
    front = document.frontmatter
    description = front.get("description", "").strip()

    if kind is AssetKind.COMMAND:
        return Command(
            name=command_name(document.path, roots.commands),
            description=description,
            sections=sections,
            source=document.path,
            frontmatter=front,
            body=document.body,
            parse_failed=parse_failed,
        )

    name = front.get("name", "").strip() or _fallback_name(document.path)

    if kind is AssetKind.AGENT:
        primary, secondary = _collect_integration_buckets(
            find_section(sections, SKILLS_INTEGRATION_HEADING)
        )
        return Agent(
            name=name,
            description=description,
            sections=sections,
            source=document.path,
            frontmatter=front,
            category=front.get("category", "").strip(),
            pattern_version=front.get("pattern_version", "").strip(),
            model=front.get("model", "").strip(),
            color=front.get("color", "").strip(),
            skills_invoked=frozenset(_collect_skills_invoked(sections)),
            primary_skills=frozenset(primary),
            secondary_skills=frozenset(secondary),
            workflows=tuple(_collect_workflows(sections)),
            parse_failed=parse_failed,
        )

    return Skill(
        name=name,
        description=description,
        sections=sections,
        source=document.path,
        frontmatter=front,
        body=document.body,
        trigger_keywords=frozenset(_collect_trigger_keywords(sections, document.body)),
        agent_integration=frozenset(_collect_agent_integration(sections, document.body)),
        parse_failed=parse_failed,
    )
