"""Fake AssetStore implementation for testing.

FakeAssetStore is an in-memory implementation backed by a dict[str, str]
mapping relative paths to content. Enables fast and deterministic tests.
"""

from pathlib import Path, PurePosixPath

from plugin_lint.core.errors import AssetEncodingError, AssetTreeError
from plugin_lint.gateway.asset_store.abc import AssetStore


class FakeAssetStore(AssetStore):
    """In-memory fake implementation backed by dict.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(
        self,
        *,
        files: dict[str, str] | None = None,
        has_root: bool = True,
        unreadable: set[str] | None = None,
        undecodable: set[str] | None = None,
    ) -> None:
        """Create FakeAssetStore with pre-seeded file contents.

        Args:
            files: Dict mapping relative paths to content
                (e.g., {"agents/test-agent.md": "---\\nname: test-agent\\n---"}).
                Defaults to empty dict.
            has_root: Whether the scan root exists. Defaults to True.
            unreadable: Relative paths whose read raises AssetTreeError.
            undecodable: Relative paths whose read raises AssetEncodingError.
        """
        self._files = files if files is not None else {}
        self._has_root = has_root
        self._unreadable = unreadable if unreadable is not None else set()
        self._undecodable = undecodable if undecodable is not None else set()
        self._read_paths: list[str] = []

    @property
    def read_paths(self) -> list[str]:
        """Paths passed to read_file(), in call order.

        This property is for test assertions only.
        """
        return list(self._read_paths)

    def has_dir(self, root: Path, rel_dir: str) -> bool:
        if not self._has_root:
            return False
        if rel_dir in ("", "."):
            return True
        return any(_is_under(path, rel_dir) for path in self._files)

    def list_markdown(self, root: Path, rel_dir: str) -> list[str]:
        if not self.has_dir(root, rel_dir):
            return []
        return sorted(
            path for path in self._files if path.endswith(".md") and _is_under(path, rel_dir)
        )

    def read_file(self, root: Path, rel_path: str) -> str:
        self._read_paths.append(rel_path)
        if rel_path in self._unreadable:
            raise AssetTreeError(rel_path, "cannot read file: Permission denied")
        if rel_path in self._undecodable:
            raise AssetEncodingError(rel_path, "not valid UTF-8")
        if rel_path not in self._files:
            raise AssetTreeError(rel_path, "cannot read file: No such file or directory")
        return self._files[rel_path]


def _is_under(path: str, rel_dir: str) -> bool:
    if rel_dir in ("", "."):
        return True
    return PurePosixPath(path).is_relative_to(PurePosixPath(rel_dir))
