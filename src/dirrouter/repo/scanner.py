from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dirrouter.repo.ignore import should_ignore_dir


def scan_csharp_files(
    project_path: Path,
    max_files: int | None = None,
    exclude_dirs: Iterable[Path] = (),
) -> list[str]:
    """
    Return absolute paths (as strings) of .cs files under project_path.
    Sorted, so the unit inventory is the same on every pass.
    """
    extra = frozenset(Path(p).resolve() for p in exclude_dirs)
    out: list[str] = []
    for root, dirs, files in _walk(project_path):
        root_p = Path(root)

        # prune ignored dirs
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(root_p / d, extra))

        for f in sorted(files):
            if f.endswith(".cs") and not f.endswith(".g.cs"):
                out.append(str((root_p / f).resolve()))
                if max_files is not None and len(out) >= max_files:
                    return out
    return out


def _walk(project_path: Path):
    # Separate helper to make unit testing easier (can be mocked)
    return os.walk(project_path)
