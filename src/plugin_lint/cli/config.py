import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

from plugin_lint.core.errors import ConfigError
from plugin_lint.core.models import Severity

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".plugin-lint.toml"
PYPROJECT_TABLE = "plugin-lint"

_STRING_KEYS = ("commands_dir", "agents_dir", "skills_dir")
_SEVERITY_KEYS = ("fail_on", "orphaned_skill_severity")
_LIST_KEYS = ("command_required_sections", "ignore")
_KNOWN_KEYS = {*_STRING_KEYS, *_SEVERITY_KEYS, *_LIST_KEYS, "jobs"}


@dataclass(frozen=True)
class LintConfig:
    """In-memory representation of `.plugin-lint.toml`.

    Example .plugin-lint.toml:
      # Asset roots, relative to the scanned directory
      agents_dir = ".claude/agents"
      skills_dir = ".claude/skills"

      # Treat orphaned skills as errors
      orphaned_skill_severity = "error"

      # Every command must explain itself
      command_required_sections = ["Usage"]
    """

    commands_dir: str
    agents_dir: str
    skills_dir: str
    fail_on: Severity
    orphaned_skill_severity: Severity
    command_required_sections: tuple[str, ...]
    ignore: tuple[str, ...]
    jobs: int
    source: Path | None  # File the values came from (None = defaults)


def default_config() -> LintConfig:
    return LintConfig(
        commands_dir="commands",
        agents_dir="agents",
        skills_dir="skills",
        fail_on=Severity.ERROR,
        orphaned_skill_severity=Severity.WARNING,
        command_required_sections=(),
        ignore=("README.md",),
        jobs=4,
        source=None,
    )


def _read_toml(path: Path) -> dict[str, object]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: invalid TOML: {e}") from e
    except OSError as e:
        raise ConfigError(f"{path}: cannot read config: {e}") from e


def _find_config_table(root: Path) -> tuple[Path, dict[str, object]] | None:
    config_path = root / CONFIG_FILE_NAME
    if config_path.is_file():
        return config_path, _read_toml(config_path)

    pyproject_path = root / "pyproject.toml"
    if pyproject_path.is_file():
        tool = _read_toml(pyproject_path).get("tool", {})
        if isinstance(tool, dict) and PYPROJECT_TABLE in tool:
            table = tool[PYPROJECT_TABLE]
            if not isinstance(table, dict):
                raise ConfigError(
                    f"{pyproject_path}: [tool.{PYPROJECT_TABLE}] must be a table"
                )
            return pyproject_path, table
    return None


def _parse_severity(path: Path, key: str, value: object) -> Severity:
    if not isinstance(value, str):
        raise ConfigError(f"{path}: '{key}' must be a string")
    try:
        return Severity(value)
    except ValueError:
        raise ConfigError(f"{path}: '{key}' must be 'error' or 'warning', got '{value}'") from None


def _parse_string_list(path: Path, key: str, value: object) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{path}: '{key}' must be a list of strings")
    return tuple(value)


def load_config(root: Path) -> LintConfig:
    """Load plugin-lint config for a scan root; otherwise return defaults.

    Looks for `.plugin-lint.toml` in the root first, then a
    `[tool.plugin-lint]` table in the root's `pyproject.toml`.

    Args:
        root: The directory being scanned.

    Returns:
        LintConfig with file values applied over defaults.

    Raises:
        ConfigError: If the file is unreadable, not TOML, or has bad values.
    """
    defaults = default_config()
    found = _find_config_table(root)
    if found is None:
        logger.debug("No plugin-lint config in %s, using defaults", root)
        return defaults

    path, data = found
    logger.debug("Loading plugin-lint config from %s", path)
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{path}: unknown config key(s): {', '.join(unknown)}")

    strings: dict[str, str] = {}
    for key in _STRING_KEYS:
        value = data.get(key, getattr(defaults, key))
        if not isinstance(value, str):
            raise ConfigError(f"{path}: '{key}' must be a string")
        strings[key] = value

    jobs = data.get("jobs", defaults.jobs)
    if not isinstance(jobs, int) or isinstance(jobs, bool) or jobs < 1:
        raise ConfigError(f"{path}: 'jobs' must be a positive integer")

    fail_on = defaults.fail_on
    if "fail_on" in data:
        fail_on = _parse_severity(path, "fail_on", data["fail_on"])

    orphan_severity = defaults.orphaned_skill_severity
    if "orphaned_skill_severity" in data:
        orphan_severity = _parse_severity(
            path, "orphaned_skill_severity", data["orphaned_skill_severity"]
        )

    lists: dict[str, tuple[str, ...]] = {}
    for key in _LIST_KEYS:
        if key in data:
            lists[key] = _parse_string_list(path, key, data[key])
        else:
            lists[key] = getattr(defaults, key)

    return LintConfig(
        commands_dir=strings["commands_dir"],
        agents_dir=strings["agents_dir"],
        skills_dir=strings["skills_dir"],
        fail_on=fail_on,
        orphaned_skill_severity=orphan_severity,
        command_required_sections=lists["command_required_sections"],
        ignore=lists["ignore"],
        jobs=jobs,
        source=path,
    )
