"""Last-modified lookup for source documents (git history first, then mtime)"""

import asyncio
from pathlib import Path
from typing import Optional

import structlog


log = structlog.get_logger()


async def _git_commit_time(path: Path) -> Optional[int]:
    """Return the committer time (epoch seconds) of the last commit touching path, else None."""
    try:
        proc = await asyncio.create_subprocess_exec(
            "git", "log", "-1", "--format=%ct", "--", path.name,
            cwd=str(path.parent),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        out, _ = await proc.communicate()
    except OSError:
        return None
    stamp = out.decode().strip()
    if proc.returncode != 0 or not stamp.isdigit():
        return None
    return int(stamp)


async def get_file_last_update(file_id: str) -> Optional[int]:
    """Return the last update time of file_id in epoch milliseconds, or None if unknown.

    Uses the last git commit touching the file when it is tracked, otherwise
    the filesystem mtime. Missing files yield None.
    """
    path = Path(file_id)
    if not path.is_file():
        return None
    seconds = await _git_commit_time(path)
    if seconds is not None:
        return seconds * 1000
    try:
        return int(path.stat().st_mtime * 1000)
    except OSError:
        log.warning("last_update_unavailable", id=file_id, exc_info=True)
        return None
