"""Scan, parse, validate and resolve a plugin asset tree.

Per-file work (read, parse, build, schema checks) fans out across a thread
pool. Each worker returns an immutable FileResult and shares nothing with the
others. Reference resolution is the fan-in point and runs once every file
has been processed.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from plugin_lint.core.builder import SKILL_ENTRY_POINT, AssetRoots, build_asset, infer_kind
from plugin_lint.core.errors import (
    AssetEncodingError,
    AssetTreeError,
    MalformedFrontmatterError,
)
from plugin_lint.core.frontmatter import parse_frontmatter
from plugin_lint.core.models import (
    Asset,
    AssetKind,
    RawDocument,
    Report,
    Severity,
    ValidationIssue,
)
from plugin_lint.core.references import resolve_references
from plugin_lint.core.report import build_report
from plugin_lint.core.schema import SchemaRules, validate_asset
from plugin_lint.core.sections import extract_sections
from plugin_lint.gateway.asset_store.abc import AssetStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOptions:
    """Everything a validation run needs besides the store and the root.

    Attributes:
        roots: Directories designating commands, agents and skills.
        rules: Configurable schema rules.
        orphan_severity: Severity of ORPHANED_SKILL issues.
        ignore: File names skipped during discovery (e.g. "README.md").
        jobs: Number of worker threads for per-file processing.
    """

    roots: AssetRoots
    rules: SchemaRules
    orphan_severity: Severity
    ignore: tuple[str, ...]
    jobs: int


@dataclass(frozen=True)
class FileResult:
    """Outcome of processing one file.

    Attributes:
        path: File path relative to the scan root.
        asset: The built asset, or None if the file could not be parsed.
        issues: Parse-level and schema issues for this file.
    """

    path: str
    asset: Asset | None
    issues: tuple[ValidationIssue, ...]


@dataclass(frozen=True)
class ValidationRun:
    """Result of a full run: the report plus per-file results for inspection."""

    report: Report
    results: tuple[FileResult, ...]

    @property
    def assets(self) -> list[Asset]:
        return [result.asset for result in self.results if result.asset is not None]


def _is_skill_entry(path: str, skills_root: str) -> bool:
    """Skills are `<root>/<name>/SKILL.md` or loose markdown files in the root."""
    posix = PurePosixPath(path)
    if posix.name == SKILL_ENTRY_POINT:
        return True
    return posix.parent == PurePosixPath(skills_root or ".")


def discover_asset_files(
    store: AssetStore, root: Path, roots: AssetRoots, ignore: tuple[str, ...]
) -> list[str]:
    """List the markdown files that are asset entry points.

    Args:
        store: Asset tree gateway.
        root: Scan root.
        roots: Configured asset roots.
        ignore: File names to skip.

    Returns:
        Sorted, de-duplicated relative paths.

    Raises:
        AssetTreeError: If the scan root does not exist.
    """
    if not store.has_dir(root, ""):
        raise AssetTreeError(str(root), "scan root does not exist or is not a directory")

    found: set[str] = set()
    for kind, rel_dir in roots.items():
        if not store.has_dir(root, rel_dir):
            logger.debug("No %s directory at %s", kind.value, rel_dir or ".")
            continue
        for path in store.list_markdown(root, rel_dir):
            if PurePosixPath(path).name in ignore:
                continue
            if infer_kind(path, roots) is AssetKind.SKILL and not _is_skill_entry(
                path, roots.skills
            ):
                continue
            found.add(path)
    return sorted(found)


def _issue(path: str, rule_id: str, message: str) -> ValidationIssue:
    return ValidationIssue(severity=Severity.ERROR, path=path, rule_id=rule_id, message=message)


def process_file(store: AssetStore, root: Path, path: str, options: ScanOptions) -> FileResult:
    """Read, parse, build and schema-check one file.

    Parse-level problems, including a file that is not valid UTF-8, become
    issues on this file only. Other read failures are environmental and
    propagate as AssetTreeError.
    """
    kind = infer_kind(path, options.roots)
    if kind is None:
        return FileResult(
            path=path,
            asset=None,
            issues=(_issue(path, "UNKNOWN_KIND", "File is outside every configured asset root"),),
        )

    try:
        content = store.read_file(root, path)
    except AssetEncodingError as e:
        return FileResult(
            path=path,
            asset=None,
            issues=(_issue(path, "UNREADABLE_ENCODING", f"File is {e.reason}"),),
        )

    try:
        parsed = parse_frontmatter(content)
    except MalformedFrontmatterError as e:
        return FileResult(
            path=path,
            asset=None,
            issues=(_issue(path, "FRONTMATTER_UNTERMINATED", str(e)),),
        )

    extraction = extract_sections(parsed.body)
    issues = [
        _issue(
            path,
            "DUPLICATE_SECTION",
            f"Duplicate heading '{'#' * dup.level} {dup.heading}'",
        )
        for dup in extraction.duplicates
    ]
    document = RawDocument(path=path, frontmatter=parsed.metadata, body=parsed.body)
    asset = build_asset(
        document, extraction.sections, kind, options.roots, parse_failed=bool(issues)
    )
    issues.extend(validate_asset(asset, options.rules))
    return FileResult(path=path, asset=asset, issues=tuple(issues))


def _process_all(
    store: AssetStore, root: Path, files: list[str], options: ScanOptions
) -> list[FileResult]:
    if options.jobs <= 1 or len(files) <= 1:
        return [process_file(store, root, path, options) for path in files]

    logger.debug("Processing %d files with %d workers", len(files), options.jobs)
    with ThreadPoolExecutor(max_workers=options.jobs) as executor:
        futures = [executor.submit(process_file, store, root, path, options) for path in files]
        try:
            return [future.result() for future in futures]
        except KeyboardInterrupt:
            for future in futures:
                future.cancel()
            raise


def run_validation(store: AssetStore, root: Path, options: ScanOptions) -> ValidationRun:
    """Validate an entire asset tree.

    Scan → parse/validate (parallel) → resolve references → report.

    Args:
        store: Asset tree gateway.
        root: Scan root.
        options: Scan options.

    Returns:
        ValidationRun with the report and per-file results.

    Raises:
        AssetTreeError: If the tree cannot be read.
    """
    files = discover_asset_files(store, root, options.roots, options.ignore)
    logger.debug("Discovered %d asset files under %s", len(files), root)

    results = _process_all(store, root, files, options)
    assets = [result.asset for result in results if result.asset is not None]

    issues: list[ValidationIssue] = []
    for result in results:
        issues.extend(result.issues)
    issues.extend(resolve_references(assets, orphan_severity=options.orphan_severity))

    report = build_report(issues, assets)
    return ValidationRun(report=report, results=tuple(results))
