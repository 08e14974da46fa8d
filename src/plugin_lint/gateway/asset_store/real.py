"""Real AssetStore implementation using filesystem operations."""

import os
from pathlib import Path

from plugin_lint.core.errors import AssetEncodingError, AssetTreeError
from plugin_lint.gateway.asset_store.abc import AssetStore


class RealAssetStore(AssetStore):
    """Production implementation that reads the asset tree from disk."""

    def has_dir(self, root: Path, rel_dir: str) -> bool:
        return (root / rel_dir).is_dir()

    def list_markdown(self, root: Path, rel_dir: str) -> list[str]:
        directory = root / rel_dir
        if not directory.is_dir():
            return []

        def _raise_walk_error(error: OSError) -> None:
            location = str(error.filename) if error.filename else str(directory)
            message = f"cannot list directory: {error.strerror or error}"
            raise AssetTreeError(location, message) from error

        found: list[str] = []
        for dirpath, _dirnames, filenames in os.walk(directory, onerror=_raise_walk_error):
            for filename in filenames:
                if filename.endswith(".md"):
                    found.append((Path(dirpath) / filename).relative_to(root).as_posix())
        return sorted(found)

    def read_file(self, root: Path, rel_path: str) -> str:
        path = root / rel_path
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise AssetEncodingError(rel_path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise AssetTreeError(rel_path, f"cannot read file: {e.strerror or e}") from e
