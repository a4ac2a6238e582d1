import concurrent.futures
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from pathspec import PathSpec

from modrewrite.config import (
    DEFAULT_MAX_WORKERS,
    FILE_TIMEOUT_SECONDS,
    IGNORE_DIRS,
    IGNORE_FILES,
    IGNORE_SUFFIXES,
    TRANSFORM_EXTENSIONS,
    TSX_EXTENSIONS,
)
from modrewrite.services.errors import TransformError
from modrewrite.services.rewrite import transform_source

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    path: str
    code: Optional[str] = None
    error: Optional[str] = None
    output_path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def find_repo_root(start_path: Path) -> Path:
    current = start_path.resolve()
    for parent in [current, *current.parents]:
        if (parent / ".git").exists():
            return parent
    return current


def _translate_gitignore_pattern(raw_line: str, base_rel: str) -> str | None:
    """
    Rewrite one line of a nested .gitignore (living in ``base_rel``) as a
    pattern relative to the repository root.
    """
    line = raw_line.rstrip("\n")
    if not line or line.lstrip().startswith("#"):
        return None

    negated = line.startswith("!")
    body = line[1:] if negated else line
    anchored = body.startswith("/")
    body = body.lstrip("/")

    prefix = f"{base_rel}/" if base_rel else ""
    if anchored or "/" in body.rstrip("/"):
        pattern = prefix + body
    else:
        pattern = f"{prefix}**/{body}"

    return f"!{pattern}" if negated else pattern


def load_gitignore_spec(root_path: Path) -> tuple[Path, PathSpec | None]:
    """Collect every .gitignore under the repo containing ``root_path``."""
    repo_root = find_repo_root(root_path)
    patterns: list[str] = []

    for dirpath, dirnames, filenames in os.walk(repo_root):
        dirnames[:] = [d for d in dirnames if d != ".git"]
        if ".gitignore" not in filenames:
            continue

        directory = Path(dirpath)
        base_rel = "" if directory == repo_root else directory.relative_to(repo_root).as_posix()
        with open(directory / ".gitignore", "r", encoding="utf-8") as f:
            for raw in f:
                translated = _translate_gitignore_pattern(raw, base_rel)
                if translated is not None:
                    patterns.append(translated)

    if not patterns:
        return repo_root, None
    return repo_root, PathSpec.from_lines("gitwildmatch", patterns)


def _is_gitignored(path: Path, ignore_root: Path, spec: PathSpec | None) -> bool:
    if spec is None:
        return False
    try:
        rel = path.resolve().relative_to(ignore_root)
    except ValueError:
        return False
    candidate = rel.as_posix()
    if path.is_dir():
        candidate += "/"
    return spec.match_file(candidate)


def _wants_transform(file_name: str) -> bool:
    if file_name in IGNORE_FILES:
        return False
    if any(file_name.endswith(suffix) for suffix in IGNORE_SUFFIXES):
        return False
    return Path(file_name).suffix in TRANSFORM_EXTENSIONS


def collect_source_files(root_path: Path) -> List[Path]:
    """Every JS/TS file under ``root_path`` that isn't ignored, in sorted order."""
    if root_path.is_file():
        return [root_path] if _wants_transform(root_path.name) else []

    ignore_root, gitignore_spec = load_gitignore_spec(root_path)
    found: List[Path] = []

    for root_dir, dirs, files in os.walk(root_path):
        root_dir_path = Path(root_dir)
        dirs[:] = sorted(
            d for d in dirs
            if d not in IGNORE_DIRS
            and not _is_gitignored(root_dir_path / d, ignore_root, gitignore_spec)
        )
        for file in sorted(files):
            if not _wants_transform(file):
                continue
            file_path = root_dir_path / file
            if _is_gitignored(file_path, ignore_root, gitignore_spec):
                continue
            found.append(file_path)

    return found


def transform_file(file_path: str) -> FileResult:
    """
    Transform one file. Never raises for bad input: failures come back on
    the result so one file can't take down a whole batch.
    Must be top-level for multiprocessing pickling.
    """
    try:
        source = Path(file_path).read_text(encoding="utf-8")
        code = transform_source(source, tsx=Path(file_path).suffix in TSX_EXTENSIONS)
        return FileResult(path=file_path, code=code)
    except (TransformError, OSError, UnicodeDecodeError) as e:
        return FileResult(path=file_path, error=str(e))


def _run_transforms(files: List[str], max_workers: int, timeout_seconds: float) -> List[FileResult]:
    """
    Run ``transform_file`` over a process pool.

    If no file finishes within ``timeout_seconds`` the batch stops waiting:
    every unfinished file is reported as timed out and the pool is shut
    down without joining the stuck worker.
    """
    results: List[FileResult] = []
    total_count = len(files)
    completed_count = 0
    pending: set = set()

    executor = concurrent.futures.ProcessPoolExecutor(max_workers=max_workers)
    try:
        future_to_file = {executor.submit(transform_file, f): f for f in files}
        pending = set(future_to_file)

        while pending:
            done, pending = concurrent.futures.wait(
                pending,
                timeout=timeout_seconds,
                return_when=concurrent.futures.FIRST_COMPLETED,
            )
            if not done:
                break

            for future in done:
                completed_count += 1
                file = future_to_file[future]
                try:
                    result = future.result()
                except Exception as exc:
                    result = FileResult(path=file, error=f"worker failed: {exc}")

                if result.ok:
                    logger.info("[%d/%d] Transformed %s", completed_count, total_count, file)
                else:
                    logger.warning("[%d/%d] Failed %s: %s", completed_count, total_count, file, result.error)
                results.append(result)

        for future in pending:
            future.cancel()
            file = future_to_file[future]
            logger.warning("Timed out after %.1fs: %s", timeout_seconds, file)
            results.append(FileResult(path=file, error="timed out"))
    finally:
        executor.shutdown(wait=not pending, cancel_futures=True)

    # completion order depends on scheduling
    results.sort(key=lambda r: r.path)
    return results


def _write_output(result: FileResult, root_path: Path, out_dir: Path) -> None:
    src = Path(result.path)
    rel = src.relative_to(root_path) if root_path.is_dir() else Path(src.name)
    target = out_dir / rel
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(result.code, encoding="utf-8")
    except OSError as e:
        logger.warning("Could not write %s: %s", target, e)
        result.error = f"could not write {target}: {e}"
        return
    result.output_path = str(target)


def transform_directory(
    root_path: Path,
    out_dir: Optional[Path] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    timeout_seconds: float = FILE_TIMEOUT_SECONDS,
) -> List[FileResult]:
    """
    Transform every source file under ``root_path``.

    Each file gets its own rewrite state, so generated names don't depend on
    which worker picked the file up. When ``out_dir`` is given, successful
    results are written there mirroring the input layout.
    """
    files = [str(p) for p in collect_source_files(root_path)]
    logger.info("Transforming %d source files under %s", len(files), root_path)

    results = _run_transforms(files, max_workers, timeout_seconds)

    if out_dir is not None:
        for result in results:
            if result.ok:
                _write_output(result, root_path, out_dir)

    return results
