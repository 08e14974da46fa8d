"""Sample plugin assets shared across tests.

The samples follow the hybrid agent pattern: a valid agent carries every
required section and one workflow that invokes a skill, and a valid skill
carries Trigger Keywords and Agent Integration sections.
"""

from plugin_lint.core.builder import AssetRoots, build_asset, infer_kind
from plugin_lint.core.frontmatter import parse_frontmatter
from plugin_lint.core.models import Asset, RawDocument, Severity
from plugin_lint.core.pipeline import ScanOptions
from plugin_lint.core.schema import SchemaRules
from plugin_lint.core.sections import extract_sections

DEFAULT_ROOTS = AssetRoots(commands="commands", agents="agents", skills="skills")

AGENT_FIELDS: dict[str, str] = {
    "name": "test-agent",
    "description": "Reviews typed Python code",
    "category": "quality",
    "pattern_version": "1.0",
    "model": "sonnet",
    "color": "blue",
}

AGENT_BODY = """\
# Test Agent

## Role & Mindset
You are a careful reviewer of typed Python.

## Triggers
- Pull requests touching Python files

## Focus Areas
- Type annotations

## Specialized Workflows

### Workflow: Type Audit
**Skills Invoked:** `{skill}`

1. Run the type checker
2. Report findings

## Skills Integration
**Primary Skills**: `{skill}`

## Outputs
- Review report

## Best Practices
- Keep feedback actionable

## Boundaries
- Never deploys code
"""

SKILL_BODY = """\
# Type Safety

## Trigger Keywords
- type hints, mypy

## Agent Integration
- `{agent}` - applies typing rules during review
"""

COMMAND_DOC = """\
---
description: Review the current diff
---

Review the staged changes and summarize the risks.
"""


def _frontmatter(fields: dict[str, str | None]) -> str:
    lines = [f"{key}: {value}" for key, value in fields.items() if value is not None]
    return "---\n" + "\n".join(lines) + "\n---\n\n"


def agent_doc(*, skill: str = "type-safety", body: str | None = None, **fields: str | None) -> str:
    """Render an agent file; pass `field=None` to drop a frontmatter field."""
    merged: dict[str, str | None] = {**AGENT_FIELDS, **fields}
    text = body if body is not None else AGENT_BODY
    return _frontmatter(merged) + text.replace("{skill}", skill)


def skill_doc(
    *, name: str | None = "type-safety", agent: str = "test-agent", body: str | None = None
) -> str:
    fields: dict[str, str | None] = {"name": name, "description": "Type hint conventions"}
    text = body if body is not None else SKILL_BODY
    return _frontmatter(fields) + text.replace("{agent}", agent)


def build(path: str, content: str, roots: AssetRoots = DEFAULT_ROOTS) -> Asset:
    """Parse and build one asset the way the pipeline does."""
    parsed = parse_frontmatter(content)
    extraction = extract_sections(parsed.body)
    kind = infer_kind(path, roots)
    assert kind is not None
    document = RawDocument(path=path, frontmatter=parsed.metadata, body=parsed.body)
    return build_asset(
        document,
        extraction.sections,
        kind,
        roots,
        parse_failed=bool(extraction.duplicates),
    )


def default_options(*, jobs: int = 1) -> ScanOptions:
    return ScanOptions(
        roots=DEFAULT_ROOTS,
        rules=SchemaRules(),
        orphan_severity=Severity.WARNING,
        ignore=("README.md",),
        jobs=jobs,
    )
