"""Tests for cross-reference resolution between agents and skills."""

from plugin_lint.core.models import Agent, Severity, Skill
from plugin_lint.core.references import build_name_index, resolve_references


def _agent(
    name: str,
    path: str,
    *,
    invoked: tuple[str, ...] = (),
    primary: tuple[str, ...] = (),
    secondary: tuple[str, ...] = (),
    parse_failed: bool = False,
) -> Agent:
    return Agent(
        name=name,
        description="",
        sections=(),
        source=path,
        frontmatter={},
        category="quality",
        pattern_version="1.0",
        model="sonnet",
        color="blue",
        skills_invoked=frozenset(invoked),
        primary_skills=frozenset(primary),
        secondary_skills=frozenset(secondary),
        workflows=(),
        parse_failed=parse_failed,
    )


def _skill(name: str, path: str, *, parse_failed: bool = False) -> Skill:
    return Skill(
        name=name,
        description="",
        sections=(),
        source=path,
        frontmatter={},
        body="",
        trigger_keywords=frozenset(),
        agent_integration=frozenset(),
        parse_failed=parse_failed,
    )


def test_resolved_reference_has_no_issues() -> None:
    assets = [
        _agent("test-agent", "agents/test-agent.md", invoked=("type-safety",)),
        _skill("type-safety", "skills/type-safety/SKILL.md"),
    ]

    assert resolve_references(assets) == []


def test_unresolved_reference_reported_once_per_agent() -> None:
    assets = [
        _agent(
            "test-agent",
            "agents/test-agent.md",
            invoked=("nonexistent-skill",),
            primary=("nonexistent-skill",),
        )
    ]

    issues = resolve_references(assets)

    assert len(issues) == 1
    assert issues[0].rule_id == "UNRESOLVED_SKILL_REFERENCE:nonexistent-skill"
    assert issues[0].path == "agents/test-agent.md"
    assert issues[0].severity is Severity.ERROR


def test_unresolved_reference_not_merged_across_agents() -> None:
    assets = [
        _agent("first", "agents/first.md", invoked=("missing",)),
        _agent("second", "agents/second.md", secondary=("missing",)),
    ]

    issues = resolve_references(assets)

    assert sorted(issue.path for issue in issues) == ["agents/first.md", "agents/second.md"]


def test_orphaned_skill_is_warning() -> None:
    issues = resolve_references([_skill("unused-skill", "skills/unused-skill/SKILL.md")])

    assert [(issue.rule_id, issue.severity) for issue in issues] == [
        ("ORPHANED_SKILL", Severity.WARNING)
    ]
    assert issues[0].message == "Skill 'unused-skill' is not referenced by any agent"


def test_orphan_severity_is_configurable() -> None:
    issues = resolve_references(
        [_skill("unused-skill", "skills/unused-skill/SKILL.md")],
        orphan_severity=Severity.ERROR,
    )

    assert issues[0].severity is Severity.ERROR


def test_secondary_reference_prevents_orphan() -> None:
    assets = [
        _agent("test-agent", "agents/test-agent.md", secondary=("async-patterns",)),
        _skill("async-patterns", "skills/async-patterns/SKILL.md"),
    ]

    assert resolve_references(assets) == []


def test_duplicate_skill_name_attributed_to_later_path() -> None:
    assets = [
        _skill("dup-skill", "skills/zeta/SKILL.md"),
        _skill("dup-skill", "skills/alpha/SKILL.md"),
        _agent("test-agent", "agents/test-agent.md", invoked=("dup-skill",)),
    ]

    issues = resolve_references(assets)

    assert len(issues) == 1
    assert issues[0].rule_id == "DUPLICATE_NAME"
    assert issues[0].path == "skills/zeta/SKILL.md"
    assert "skills/alpha/SKILL.md" in issues[0].message


def test_duplicate_agent_names_are_reported() -> None:
    assets = [
        _agent("test-agent", "agents/a.md"),
        _agent("test-agent", "agents/b.md"),
    ]

    issues = resolve_references(assets)

    assert [(issue.rule_id, issue.path) for issue in issues] == [("DUPLICATE_NAME", "agents/b.md")]


def test_same_name_across_kinds_is_allowed() -> None:
    assets = [
        _agent("type-safety", "agents/type-safety.md", invoked=("type-safety",)),
        _skill("type-safety", "skills/type-safety/SKILL.md"),
    ]

    assert resolve_references(assets) == []


def test_parse_failed_agent_references_are_skipped() -> None:
    assets = [_agent("test-agent", "agents/test-agent.md", invoked=("missing",), parse_failed=True)]

    assert resolve_references(assets) == []


def test_parse_failed_agent_references_prevent_orphans() -> None:
    assets = [
        _agent("test-agent", "agents/test-agent.md", invoked=("type-safety",), parse_failed=True),
        _skill("type-safety", "skills/type-safety/SKILL.md"),
    ]

    assert resolve_references(assets) == []


def test_parse_failed_skill_resolves_but_is_never_orphaned() -> None:
    skill = _skill("broken-skill", "skills/broken-skill/SKILL.md", parse_failed=True)
    agent = _agent("test-agent", "agents/test-agent.md", invoked=("broken-skill",))

    assert resolve_references([skill]) == []
    assert resolve_references([skill, agent]) == []


def test_name_index_keeps_first_path() -> None:
    first = _skill("dup-skill", "skills/a/SKILL.md")
    second = _skill("dup-skill", "skills/b/SKILL.md")

    index = build_name_index([second, first])

    assert index.skills() == {"dup-skill": first}
    assert index.duplicates == [second]
