"""Kind-specific structural checks for plugin assets."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from plugin_lint.core.models import (
    Agent,
    AgentCategory,
    AgentColor,
    AgentModel,
    Asset,
    Command,
    Severity,
    Skill,
    ValidationIssue,
    enum_values,
)
from plugin_lint.core.sections import find_section, labelled_values

COMMAND_REQUIRED_FIELDS = ("description",)
AGENT_REQUIRED_FIELDS = ("name", "description", "category", "pattern_version", "model", "color")
SKILL_REQUIRED_FIELDS = ("name", "description")

AGENT_ENUM_FIELDS: dict[str, type[Enum]] = {
    "category": AgentCategory,
    "model": AgentModel,
    "color": AgentColor,
}

AGENT_REQUIRED_SECTIONS = (
    "Role & Mindset",
    "Triggers",
    "Focus Areas",
    "Specialized Workflows",
    "Skills Integration",
    "Outputs",
    "Best Practices",
    "Boundaries",
)
SKILL_REQUIRED_SECTIONS = ("Trigger Keywords", "Agent Integration")


@dataclass(frozen=True)
class SchemaRules:
    """Configurable parts of the schema.

    Attributes:
        command_required_sections: Headings every command must contain.
            Empty by default; commands only need a non-empty body.
    """

    command_required_sections: tuple[str, ...] = ()


def _error(asset: Asset, rule_id: str, message: str) -> ValidationIssue:
    return ValidationIssue(
        severity=Severity.ERROR, path=asset.source, rule_id=rule_id, message=message
    )


def check_required_fields(asset: Asset, fields: Sequence[str]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for field_name in fields:
        if not asset.frontmatter.get(field_name, "").strip():
            issues.append(
                _error(
                    asset,
                    f"MISSING_FIELD:{field_name}",
                    f"Missing required frontmatter field '{field_name}'",
                )
            )
    return issues


def check_enum_fields(agent: Agent) -> list[ValidationIssue]:
    """Check enum-valued agent fields against their closed sets.

    Absent fields are left to check_required_fields so that a missing value
    is reported exactly once.
    """
    issues: list[ValidationIssue] = []
    for field_name, enum_type in AGENT_ENUM_FIELDS.items():
        value = agent.frontmatter.get(field_name, "").strip()
        if not value:
            continue
        allowed = enum_values(enum_type)
        if value not in allowed:
            issues.append(
                _error(
                    agent,
                    f"INVALID_ENUM:{field_name}",
                    f"Invalid {field_name} '{value}' (allowed: {', '.join(allowed)})",
                )
            )
    return issues


def check_required_sections(
    asset: Asset,
    required: Sequence[str],
    *,
    allow_inline_label: bool = False,
) -> list[ValidationIssue]:
    """Check that every required heading is present and has content.

    Args:
        asset: The asset to check.
        required: Heading texts, matched exactly and case-sensitively.
        allow_inline_label: Also accept an inline `**Heading**: ...` line in
            the body in place of a heading.
    """
    issues: list[ValidationIssue] = []
    for heading in required:
        section = find_section(asset.sections, heading)
        if section is None:
            if allow_inline_label and _has_inline_label(asset, heading):
                continue
            issues.append(
                _error(
                    asset,
                    f"MISSING_SECTION:{heading}",
                    f"Missing required section '## {heading}'",
                )
            )
        elif not section.content.strip():
            issues.append(
                _error(
                    asset,
                    f"EMPTY_SECTION:{heading}",
                    f"Required section '## {heading}' is empty",
                )
            )
    return issues


def _has_inline_label(asset: Asset, label: str) -> bool:
    if isinstance(asset, Agent):
        return False
    return bool(labelled_values(asset.body, label))


def check_workflows(agent: Agent) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for heading, has_skills in agent.workflows:
        if has_skills:
            continue
        issues.append(
            ValidationIssue(
                severity=Severity.WARNING,
                path=agent.source,
                rule_id="WORKFLOW_MISSING_SKILLS",
                message=f"Workflow '{heading}' has no 'Skills Invoked:' line",
            )
        )
    return issues


def validate_asset(asset: Asset, rules: SchemaRules) -> list[ValidationIssue]:
    """Apply kind-specific structural contracts to one asset.

    Assets that already failed parsing are skipped; their parse-level issue
    is the only one reported for them.

    Args:
        asset: The asset to validate.
        rules: Configurable schema rules.

    Returns:
        Issues found, in rule order (sorting happens in the report).
    """
    if asset.parse_failed:
        return []

    if isinstance(asset, Agent):
        return [
            *check_required_fields(asset, AGENT_REQUIRED_FIELDS),
            *check_enum_fields(asset),
            *check_required_sections(asset, AGENT_REQUIRED_SECTIONS),
            *check_workflows(asset),
        ]

    if isinstance(asset, Skill):
        return [
            *check_required_fields(asset, SKILL_REQUIRED_FIELDS),
            *check_required_sections(asset, SKILL_REQUIRED_SECTIONS, allow_inline_label=True),
        ]

    assert isinstance(asset, Command)
    issues = check_required_fields(asset, COMMAND_REQUIRED_FIELDS)
    if not asset.body.strip():
        issues.append(_error(asset, "EMPTY_BODY", "Command body is empty"))
    issues.extend(check_required_sections(asset, rules.command_required_sections))
    return issues
