"""Cross-reference resolution between agents and skills.

Operates on the complete asset set, so it runs only after every file has
been parsed.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from plugin_lint.core.models import (
    Agent,
    Asset,
    AssetKind,
    Severity,
    Skill,
    ValidationIssue,
)


@dataclass(frozen=True)
class NameIndex:
    """Canonical assets by name, per kind.

    Attributes:
        canonical: kind -> name -> the asset whose path sorts first.
        duplicates: Assets that reuse a name already held by a canonical asset.
    """

    canonical: dict[AssetKind, dict[str, Asset]]
    duplicates: list[Asset]

    def skills(self) -> dict[str, Asset]:
        return self.canonical.get(AssetKind.SKILL, {})


def build_name_index(assets: Sequence[Asset]) -> NameIndex:
    """Index assets by name, keeping the lexicographically first path.

    Args:
        assets: All assets from the scan, in any order.

    Returns:
        NameIndex with canonical assets and later-path duplicates.
    """
    canonical: dict[AssetKind, dict[str, Asset]] = {kind: {} for kind in AssetKind}
    duplicates: list[Asset] = []
    for asset in sorted(assets, key=lambda a: a.source):
        by_name = canonical[asset.kind]
        if asset.name in by_name:
            duplicates.append(asset)
            continue
        by_name[asset.name] = asset
    return NameIndex(canonical=canonical, duplicates=duplicates)


def resolve_references(
    assets: Sequence[Asset],
    *,
    orphan_severity: Severity = Severity.WARNING,
) -> list[ValidationIssue]:
    """Check names across the whole asset set.

    Reports:
    - DUPLICATE_NAME on every later-path asset that reuses a name of its kind
    - UNRESOLVED_SKILL_REFERENCE:<name> once per agent and missing skill name,
      except for agents that already failed parsing
    - ORPHANED_SKILL on each canonical skill that no agent references (agents
      that failed parsing still count as references)

    Args:
        assets: All assets from the scan.
        orphan_severity: Severity for ORPHANED_SKILL issues.

    Returns:
        Reference issues, unsorted.
    """
    index = build_name_index(assets)
    issues: list[ValidationIssue] = []

    for duplicate in index.duplicates:
        original = index.canonical[duplicate.kind][duplicate.name]
        issues.append(
            ValidationIssue(
                severity=Severity.ERROR,
                path=duplicate.source,
                rule_id="DUPLICATE_NAME",
                message=(
                    f"{duplicate.kind.value} name '{duplicate.name}' is already "
                    f"defined by {original.source}"
                ),
            )
        )

    skills = index.skills()
    referenced: set[str] = set()
    agents = sorted((a for a in assets if isinstance(a, Agent)), key=lambda a: a.source)
    for agent in agents:
        referenced |= agent.referenced_skills
        if agent.parse_failed:
            continue
        for name in sorted(agent.referenced_skills):
            if name in skills:
                continue
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    path=agent.source,
                    rule_id=f"UNRESOLVED_SKILL_REFERENCE:{name}",
                    message=f"Agent '{agent.name}' references unknown skill '{name}'",
                )
            )

    for name, skill in sorted(skills.items()):
        assert isinstance(skill, Skill)
        if skill.parse_failed or name in referenced:
            continue
        issues.append(
            ValidationIssue(
                severity=orphan_severity,
                path=skill.source,
                rule_id="ORPHANED_SKILL",
                message=f"Skill '{name}' is not referenced by any agent",
            )
        )

    return issues
