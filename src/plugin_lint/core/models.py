"""Data models for plugin asset validation.

The closed enum sets defined here are the single source of truth for agent
frontmatter values. Validators import them rather than re-declaring the
allowed values.
"""

from dataclasses import dataclass, field
from enum import Enum


class AssetKind(Enum):
    """Kind of plugin asset, determined by which root a file lives under."""

    COMMAND = "command"
    AGENT = "agent"
    SKILL = "skill"


class Severity(Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"

    @property
    def rank(self) -> int:
        """Numeric rank used for threshold comparisons (higher is worse)."""
        return 1 if self is Severity.ERROR else 0


class AgentCategory(Enum):
    ARCHITECTURE = "architecture"
    DEVELOPMENT = "development"
    QUALITY = "quality"
    SECURITY = "security"
    PERFORMANCE = "performance"
    TESTING = "testing"
    DOCUMENTATION = "documentation"
    OPERATIONS = "operations"
    ANALYSIS = "analysis"
    ORCHESTRATION = "orchestration"


class AgentModel(Enum):
    SONNET = "sonnet"
    OPUS = "opus"
    HAIKU = "haiku"
    INHERIT = "inherit"


class AgentColor(Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"
    ORANGE = "orange"
    PINK = "pink"
    CYAN = "cyan"


def enum_values(enum_type: type[Enum]) -> list[str]:
    """Return the string values of an enum, in declaration order."""
    return [str(member.value) for member in enum_type]


@dataclass(frozen=True)
class RawDocument:
    """A single source file as read from the asset tree.

    Attributes:
        path: POSIX path relative to the scan root. Unique within a scan.
        frontmatter: Parsed `key: value` metadata.
        body: Text after the frontmatter block.
    """

    path: str
    frontmatter: dict[str, str]
    body: str


@dataclass(frozen=True)
class Section:
    """A heading-delimited slice of a document body.

    Attributes:
        heading: Heading text without the leading `#` characters.
        level: Number of leading `#` characters.
        content: Text up to the next heading of the same or a shallower level.
    """

    heading: str
    level: int
    content: str


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    sections: tuple[Section, ...]
    source: str
    frontmatter: dict[str, str]
    body: str
    parse_failed: bool = False
    kind: AssetKind = field(default=AssetKind.COMMAND, init=False)


@dataclass(frozen=True)
class Agent:
    """An agent persona definition following the hybrid agent pattern.

    Attributes:
        category: Raw `category` value; checked against AgentCategory later.
        pattern_version: Raw `pattern_version` value.
        model: Raw `model` value; checked against AgentModel later.
        color: Raw `color` value; checked against AgentColor later.
        skills_invoked: Names from every `Skills Invoked:` line.
        primary_skills: Names listed as primary in Skills Integration.
        secondary_skills: Names listed as secondary in Skills Integration.
        workflows: Workflow subsection heading -> whether it has a
            `Skills Invoked:` line.
    """

    name: str
    description: str
    sections: tuple[Section, ...]
    source: str
    frontmatter: dict[str, str]
    category: str
    pattern_version: str
    model: str
    color: str
    skills_invoked: frozenset[str]
    primary_skills: frozenset[str]
    secondary_skills: frozenset[str]
    workflows: tuple[tuple[str, bool], ...]
    parse_failed: bool = False
    kind: AssetKind = field(default=AssetKind.AGENT, init=False)

    @property
    def referenced_skills(self) -> frozenset[str]:
        """All skill names this agent claims to use."""
        return self.skills_invoked | self.primary_skills | self.secondary_skills


@dataclass(frozen=True)
class Skill:
    name: str
    description: str
    sections: tuple[Section, ...]
    source: str
    frontmatter: dict[str, str]
    body: str
    trigger_keywords: frozenset[str]
    agent_integration: frozenset[str]
    parse_failed: bool = False
    kind: AssetKind = field(default=AssetKind.SKILL, init=False)


Asset = Command | Agent | Skill


@dataclass(frozen=True)
class ValidationIssue:
    """One detected problem.

    Attributes:
        severity: Error or Warning.
        path: Path of the asset the issue is attributed to.
        rule_id: Identifier of the violated rule (e.g. "MISSING_FIELD:name").
        message: Human-readable description.
    """

    severity: Severity
    path: str
    rule_id: str
    message: str

    @property
    def sort_key(self) -> tuple[str, str, str, str]:
        return (self.path, self.rule_id, self.message, self.severity.value)


@dataclass(frozen=True)
class Report:
    """Aggregate result of one validation run.

    Attributes:
        issues: Issues sorted by path, rule id and message.
        asset_counts: Number of parsed assets per kind.
    """

    issues: tuple[ValidationIssue, ...]
    asset_counts: dict[AssetKind, int]

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is Severity.WARNING)

    @property
    def total_assets(self) -> int:
        return sum(self.asset_counts.values())

    def exit_code(self, fail_on: Severity = Severity.ERROR) -> int:
        """Return 1 if any issue is at or above the threshold, else 0."""
        for issue in self.issues:
            if issue.severity.rank >= fail_on.rank:
                return 1
        return 0
