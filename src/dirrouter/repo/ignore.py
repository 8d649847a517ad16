from __future__ import annotations

from pathlib import Path

DEFAULT_IGNORES = {
    ".git",
    ".vs",
    ".idea",
    "bin",
    "obj",
    "node_modules",
    "packages",
    "TestResults",
}


def should_ignore_dir(dir_path: Path, extra: frozenset[Path] = frozenset()) -> bool:
    return dir_path.name in DEFAULT_IGNORES or dir_path.resolve() in extra
