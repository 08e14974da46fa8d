"""Asset store gateway ABC.

This gateway provides read-only access to the plugin asset tree.
All file paths are POSIX paths relative to the scan root.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class AssetStore(ABC):
    """Abstract gateway for reading plugin asset files."""

    @abstractmethod
    def has_dir(self, root: Path, rel_dir: str) -> bool:
        """Check if a directory exists under the scan root.

        Args:
            root: Scan root
            rel_dir: Relative directory path ("" for the scan root itself)

        Returns:
            True if the directory exists
        """
        ...

    @abstractmethod
    def list_markdown(self, root: Path, rel_dir: str) -> list[str]:
        """List markdown files under a directory, recursively.

        Args:
            root: Scan root
            rel_dir: Relative directory path ("" for the scan root itself)

        Returns:
            Sorted relative paths (e.g., "skills/type-safety/SKILL.md")
        """
        ...

    @abstractmethod
    def read_file(self, root: Path, rel_path: str) -> str:
        """Read a file from the asset tree.

        Args:
            root: Scan root
            rel_path: Relative file path

        Returns:
            File content

        Raises:
            AssetTreeError: If the file cannot be read
            AssetEncodingError: If the file is not valid UTF-8
        """
        ...
