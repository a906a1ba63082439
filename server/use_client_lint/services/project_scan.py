import os
import logging
import concurrent.futures
from pathlib import Path
from typing import Iterable, List, Optional

from pathspec import PathSpec

from use_client_lint.config import (
    FILE_TIMEOUT_SECONDS,
    IGNORE_DIRS,
    IGNORE_FILES,
    SOURCE_SUFFIXES,
)
from use_client_lint.models import FileReport, LintOptions, LintReport
from use_client_lint.services.linter import lint_file

logger = logging.getLogger(__name__)


def find_repo_root(start_path: Path) -> Path:
    current = start_path.resolve()
    for parent in [current, *current.parents]:
        if (parent / ".git").exists():
            return parent
    return current


def _translate_gitignore_pattern(raw_line: str, base_rel: str) -> Optional[str]:
    """
    Rewrite one line of the .gitignore in `base_rel` as a repo-root-relative
    gitwildmatch pattern. Negations and anchored patterns keep their meaning;
    a bare name matches anywhere below its .gitignore.
    """
    line = raw_line.rstrip("\n")
    if not line or line.lstrip().startswith("#"):
        return None

    negated = line.startswith("!")
    body = line[1:] if negated else line
    body = body.lstrip("/")

    if "/" in body.rstrip("/"):
        pattern = f"{base_rel}/{body}" if base_rel else body
    else:
        pattern = f"{base_rel}/**/{body}" if base_rel else f"**/{body}"

    return f"!{pattern}" if negated else pattern


def load_gitignore_spec(root_path: Path) -> tuple[Path, PathSpec | None]:
    """All .gitignore rules of the repository containing `root_path`, nested files included."""
    repo_root = find_repo_root(root_path)
    patterns: list[str] = []

    for dirpath, dirnames, filenames in os.walk(repo_root):
        dirnames[:] = [d for d in dirnames if d != ".git" and d not in IGNORE_DIRS]
        if ".gitignore" not in filenames:
            continue
        directory = Path(dirpath)
        base_rel = directory.relative_to(repo_root).as_posix() if directory != repo_root else ""
        with open(directory / ".gitignore", "r", encoding="utf-8", errors="ignore") as f:
            for raw in f:
                translated = _translate_gitignore_pattern(raw, base_rel)
                if translated is not None:
                    patterns.append(translated)

    if not patterns:
        return repo_root, None
    return repo_root, PathSpec.from_lines("gitwildmatch", patterns)


def is_gitignored(path: Path, ignore_root: Path, spec: PathSpec | None) -> bool:
    if spec is None:
        return False
    try:
        rel = path.resolve().relative_to(ignore_root)
    except ValueError:
        return False
    rel_str = rel.as_posix()
    if path.is_dir():
        # Directory patterns like `build/` only match with a trailing slash
        return spec.match_file(rel_str) or spec.match_file(rel_str + "/")
    return spec.match_file(rel_str)


def is_source_file(path: Path) -> bool:
    if path.name in IGNORE_FILES or path.name.endswith(".d.ts"):
        return False
    return path.suffix.lower() in SOURCE_SUFFIXES


def collect_source_files(root_path: Path) -> List[Path]:
    """Source files under `root_path`, skipping ignored directories and gitignored paths."""
    if root_path.is_file():
        return [root_path] if is_source_file(root_path) else []

    ignore_root, spec = load_gitignore_spec(root_path)
    found: List[Path] = []
    for root_dir, dirs, files in os.walk(root_path):
        root_dir_path = Path(root_dir)
        # Prune in place so os.walk never descends into ignored directories
        dirs[:] = sorted(
            d for d in dirs
            if d not in IGNORE_DIRS and not is_gitignored(root_dir_path / d, ignore_root, spec)
        )
        for name in sorted(files):
            file_path = root_dir_path / name
            if is_source_file(file_path) and not is_gitignored(file_path, ignore_root, spec):
                found.append(file_path)
    return found


def lint_single_file(file_path: str, options: LintOptions, fix: bool) -> FileReport:
    """
    Lint and optionally fix one file, writing the fix back to disk.
    Must be top-level for multiprocessing pickling.
    """
    report = lint_file(file_path, options, fix=fix)
    if report.output is not None:
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(report.output)
    return report


def _lint_in_pool(files: List[str], options: LintOptions, fix: bool, jobs: int) -> List[FileReport]:
    reports: List[FileReport] = []
    executor = concurrent.futures.ProcessPoolExecutor(max_workers=jobs)
    timed_out = False
    try:
        future_to_file = {executor.submit(lint_single_file, f, options, fix): f for f in files}
        # Results are collected in submission order so the report is stable.
        for future, file in future_to_file.items():
            try:
                reports.append(future.result(timeout=FILE_TIMEOUT_SECONDS))
            except concurrent.futures.TimeoutError:
                logger.warning("Timeout linting %s", file)
                if not timed_out:
                    timed_out = True
                    # Queued files are cancelled and running workers are not awaited.
                    executor.shutdown(wait=False, cancel_futures=True)
                reports.append(FileReport(filename=file, error=f"timed out after {FILE_TIMEOUT_SECONDS:g}s"))
            except concurrent.futures.CancelledError:
                reports.append(FileReport(filename=file, error="skipped after an earlier timeout"))
            except Exception as exc:
                logger.warning("Worker failed on %s: %s", file, exc)
                reports.append(FileReport(filename=file, error=str(exc)))
    finally:
        executor.shutdown(wait=not timed_out, cancel_futures=True)
    return reports


def lint_paths(
    paths: Iterable[Path],
    options: Optional[LintOptions] = None,
    fix: bool = False,
    jobs: int = 1,
) -> LintReport:
    """
    Lint every source file under `paths`.

    Files that cannot be read or parsed are recorded with an `error` and do
    not stop the scan. With `fix`, fixed files are rewritten in place.
    """
    options = options or LintOptions()
    paths = [Path(p) for p in paths]
    files: List[str] = []
    for path in paths:
        if not path.exists():
            raise FileNotFoundError(f"No such file or directory: {path}")
        files.extend(str(f) for f in collect_source_files(path))

    logger.info("Linting %d source files", len(files))
    if jobs > 1 and len(files) > 1:
        reports = _lint_in_pool(files, options, fix, jobs)
    else:
        reports = [lint_single_file(f, options, fix) for f in files]

    root = paths[0] if len(paths) == 1 else Path(os.path.commonpath([str(p.resolve()) for p in paths]))
    report = LintReport(
        root=str(root),
        files=reports,
        error_count=sum(r.error_count for r in reports),
        fixed_count=sum(1 for r in reports if r.output is not None),
    )
    failed = sum(1 for r in reports if r.error is not None)
    logger.info("%d problem(s) in %d files, %d could not be linted", report.error_count, len(reports), failed)
    return report
