from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from pathsel.models import FileRecord
from pathsel.selector import PathSelector

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)


def _sha256_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        while True:
            chunk = fh.read(chunk_size)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def _walk(directory: Path, selector: PathSelector) -> Iterator[Path]:
    try:
        entries = sorted(directory.iterdir())
    except FileNotFoundError:
        return
    except PermissionError:
        logger.debug("Skipped unreadable %s", directory)
        return

    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            if selector.could_hold_selected(entry):
                yield from _walk(entry, selector)
            else:
                logger.debug("Pruned %s", entry)
        elif entry.is_file() and selector.is_selected(entry):
            yield entry


def iter_selected_paths(root: Path, selector: PathSelector) -> Iterator[Path]:
    """Yield selected files under ``root``, skipping directories that cannot hold any.

    ``root`` must be the selector's base directory or one of its descendants.
    """
    root = Path(root)
    if not selector.could_hold_selected(root):
        return
    yield from _walk(root, selector)


def _record_for(file_path: Path, root: Path, *, with_digest: bool) -> FileRecord | None:
    try:
        stat = file_path.stat()
        sha256 = _sha256_file(file_path) if with_digest else None
    except FileNotFoundError:
        return None
    except PermissionError:
        logger.debug("Skipped unreadable %s", file_path)
        return None
    return FileRecord(
        path=file_path.relative_to(root).as_posix(),
        size=stat.st_size,
        mtime_ns=stat.st_mtime_ns,
        sha256=sha256,
    )


def scan_selected_files(
    root: Path,
    selector: PathSelector,
    *,
    with_digest: bool = False,
) -> list[FileRecord]:
    root = Path(root)
    records: list[FileRecord] = []
    for file_path in iter_selected_paths(root, selector):
        record = _record_for(file_path, root, with_digest=with_digest)
        if record is not None:
            records.append(record)
    return records


def scan_selected_files_with_status(
    root: Path,
    selector: PathSelector,
    *,
    with_digest: bool = False,
    console: "Console | None" = None,
) -> list[FileRecord]:
    if console is None:
        return scan_selected_files(root, selector, with_digest=with_digest)
    with console.status(f"Scanning {root} ..."):
        return scan_selected_files(root, selector, with_digest=with_digest)
