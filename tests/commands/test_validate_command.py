"""Tests for the plugin-lint validate command.

Most tests inject FakeAssetStore through the click context object; the
integration tests at the bottom run against a real temporary directory.
"""

import json
from pathlib import Path

from click.testing import CliRunner, Result

from plugin_lint.cli.cli import cli
from plugin_lint.gateway.asset_store.fake import FakeAssetStore
from tests.test_utils.samples import COMMAND_DOC, agent_doc, skill_doc

VALID_FILES = {
    "agents/test-agent.md": agent_doc(),
    "skills/type-safety/SKILL.md": skill_doc(),
    "commands/review.md": COMMAND_DOC,
}

ORPHAN_FILES = {"skills/unused-skill/SKILL.md": skill_doc(name="unused-skill")}


def _invoke(store: FakeAssetStore, *args: str, **kwargs: object) -> Result:
    runner = CliRunner()
    return runner.invoke(cli, ["validate", "/plugin", *args], obj=store, **kwargs)


def test_valid_plugin_exits_zero() -> None:
    result = _invoke(FakeAssetStore(files=VALID_FILES))

    assert result.exit_code == 0, result.output
    assert "0 errors, 0 warnings across 3 assets" in result.output


def test_unresolved_reference_exits_one() -> None:
    store = FakeAssetStore(files={"agents/test-agent.md": agent_doc(skill="nonexistent-skill")})

    result = _invoke(store)

    assert result.exit_code == 1
    assert "agents/test-agent.md" in result.output
    assert "UNRESOLVED_SKILL_REFERENCE:nonexistent-skill" in result.output
    assert "1 errors, 0 warnings across 1 assets" in result.output


def test_warnings_do_not_fail_by_default() -> None:
    result = _invoke(FakeAssetStore(files=ORPHAN_FILES))

    assert result.exit_code == 0
    assert "ORPHANED_SKILL" in result.output
    assert "0 errors, 1 warnings across 1 assets" in result.output


def test_fail_on_warning() -> None:
    result = _invoke(FakeAssetStore(files=ORPHAN_FILES), "--fail-on", "warning")

    assert result.exit_code == 1


def test_orphans_as_errors() -> None:
    result = _invoke(FakeAssetStore(files=ORPHAN_FILES), "--orphans-as-errors")

    assert result.exit_code == 1
    assert "1 errors, 0 warnings" in result.output


def test_json_format() -> None:
    store = FakeAssetStore(files={**VALID_FILES, "agents/test-agent.md": agent_doc(color="teal")})

    result = _invoke(store, "--format", "json")

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["errorCount"] == 1
    assert payload["warningCount"] == 0
    assert payload["assetCounts"] == {"agent": 1, "command": 1, "skill": 1}
    assert payload["issues"][0]["ruleId"] == "INVALID_ENUM:color"
    assert payload["issues"][0]["path"] == "agents/test-agent.md"


def test_output_is_identical_across_runs() -> None:
    files = {**ORPHAN_FILES, "agents/test-agent.md": agent_doc(category=None)}

    first = _invoke(FakeAssetStore(files=files), "--jobs", "4")
    second = _invoke(FakeAssetStore(files=dict(reversed(files.items()))), "--jobs", "1")

    assert first.output == second.output


def test_missing_root_exits_two() -> None:
    result = _invoke(FakeAssetStore(has_root=False))

    assert result.exit_code == 2
    assert "Error:" in result.output
    assert "does not exist" in result.output


def test_unreadable_file_exits_two() -> None:
    store = FakeAssetStore(files=VALID_FILES, unreadable={"commands/review.md"})

    result = _invoke(store)

    assert result.exit_code == 2
    assert "Permission denied" in result.output


class _ExplodingStore(FakeAssetStore):
    def __init__(self, error: BaseException) -> None:
        super().__init__(files={"commands/review.md": COMMAND_DOC})
        self._error = error

    def read_file(self, root: Path, rel_path: str) -> str:
        raise self._error


def test_internal_error_exits_two() -> None:
    result = _invoke(_ExplodingStore(RuntimeError("boom")))

    assert result.exit_code == 2
    assert "Internal error: RuntimeError: boom" in result.output


def test_interrupt_exits_130() -> None:
    result = _invoke(_ExplodingStore(KeyboardInterrupt()))

    assert result.exit_code == 130
    assert "Interrupted" in result.output


def test_no_color_environment_disables_styling() -> None:
    store_files = {"agents/test-agent.md": agent_doc(skill="nonexistent-skill")}

    colored = _invoke(FakeAssetStore(files=store_files), color=True, env={"NO_COLOR": None})
    plain = _invoke(FakeAssetStore(files=store_files), color=True, env={"NO_COLOR": "1"})
    flagged = _invoke(FakeAssetStore(files=store_files), "--no-color", color=True)

    assert "\x1b[" in colored.output
    assert "\x1b[" not in plain.output
    assert "\x1b[" not in flagged.output


def test_jobs_must_be_positive() -> None:
    result = _invoke(FakeAssetStore(files=VALID_FILES), "--jobs", "0")

    assert result.exit_code == 2


def test_custom_directories() -> None:
    store = FakeAssetStore(
        files={
            ".claude/agents/test-agent.md": agent_doc(),
            ".claude/skills/type-safety/SKILL.md": skill_doc(),
        }
    )

    result = _invoke(store, "--agents-dir", ".claude/agents", "--skills-dir", ".claude/skills")

    assert result.exit_code == 0, result.output
    assert "across 2 assets" in result.output


def _write(root: Path, rel_path: str, content: str) -> None:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_real_directory_with_config_file(tmp_path: Path) -> None:
    _write(tmp_path, ".plugin-lint.toml", 'agents_dir = "personas"\nfail_on = "warning"\n')
    _write(tmp_path, "personas/test-agent.md", agent_doc())
    _write(tmp_path, "skills/type-safety/SKILL.md", skill_doc())
    _write(tmp_path, "skills/unused-skill/SKILL.md", skill_doc(name="unused-skill"))

    result = CliRunner().invoke(cli, ["validate", str(tmp_path)])

    assert result.exit_code == 1
    assert "skills/unused-skill/SKILL.md" in result.output
    assert "0 errors, 1 warnings across 3 assets" in result.output


def test_real_directory_missing_root(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["validate", str(tmp_path / "nope")])

    assert result.exit_code == 2


def test_invalid_config_exits_two(tmp_path: Path) -> None:
    _write(tmp_path, ".plugin-lint.toml", 'unknown = "x"\n')

    result = CliRunner().invoke(cli, ["validate", str(tmp_path)])

    assert result.exit_code == 2
    assert "unknown config key" in result.output
