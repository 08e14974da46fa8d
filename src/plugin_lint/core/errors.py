"""Exception types raised by plugin-lint.

Parse-level errors are converted into validation issues for the single file
they concern. Environmental errors abort the whole run.
"""


class PluginLintError(Exception):
    """Base class for plugin-lint errors."""


class MalformedFrontmatterError(PluginLintError):
    """Raised when an opening `---` delimiter has no matching closing line."""


class AssetTreeError(PluginLintError):
    """Raised when the asset tree cannot be read.

    Covers a missing scan root, permission problems and unreadable files.
    These are fatal to the run, unlike validation issues.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ConfigError(PluginLintError):
    """Raised when a plugin-lint configuration file is invalid."""


class AssetEncodingError(PluginLintError):
    """Raised when an asset file is not valid UTF-8.

    Unlike AssetTreeError this concerns a single file; the pipeline reports
    it as an issue on that file and keeps scanning.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
