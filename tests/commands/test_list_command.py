"""Tests for the plugin-lint list command."""

from click.testing import CliRunner, Result

from plugin_lint.cli.cli import cli
from plugin_lint.gateway.asset_store.fake import FakeAssetStore
from tests.test_utils.samples import COMMAND_DOC, agent_doc, skill_doc

FILES = {
    "agents/test-agent.md": agent_doc(),
    "skills/type-safety/SKILL.md": skill_doc(),
    "commands/erk/plan.md": COMMAND_DOC,
}


def _invoke(store: FakeAssetStore, *args: str) -> Result:
    return CliRunner().invoke(cli, ["list", "/plugin", *args], obj=store)


def test_lists_assets_grouped_by_kind() -> None:
    result = _invoke(FakeAssetStore(files=FILES))

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[:2] == ["COMMANDS:", "  erk:plan"]
    assert "AGENTS:" in lines
    assert "  test-agent" in lines
    assert "SKILLS:" in lines
    assert "  type-safety" in lines


def test_kind_filter() -> None:
    result = _invoke(FakeAssetStore(files=FILES), "--kind", "skill")

    assert result.exit_code == 0
    assert "SKILLS:" in result.output
    assert "AGENTS:" not in result.output
    assert "COMMANDS:" not in result.output


def test_verbose_shows_details() -> None:
    result = _invoke(FakeAssetStore(files=FILES), "--kind", "agent", "--verbose")

    assert result.exit_code == 0
    assert "Path: agents/test-agent.md" in result.output
    assert "Description: Reviews typed Python code" in result.output
    assert "Skills: type-safety" in result.output


def test_parse_failures_are_marked() -> None:
    files = {
        "agents/test-agent.md": agent_doc() + "\n## Outputs\n- again\n",
        "agents/broken.md": "---\nname: broken\n",
    }

    result = _invoke(FakeAssetStore(files=files))

    assert result.exit_code == 0
    assert "test-agent (parse error)" in result.output
    assert "UNPARSEABLE:" in result.output
    assert "  agents/broken.md" in result.output


def test_empty_tree() -> None:
    result = _invoke(FakeAssetStore())

    assert result.exit_code == 0
    assert "No assets found" in result.output


def test_list_does_not_fail_on_validation_issues() -> None:
    result = _invoke(FakeAssetStore(files={"agents/test-agent.md": agent_doc(model="gpt")}))

    assert result.exit_code == 0
    assert "test-agent" in result.output


def test_missing_root_exits_two() -> None:
    result = _invoke(FakeAssetStore(has_root=False))

    assert result.exit_code == 2
