from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from dirrouter.conventions import GENERATED_SUFFIX, HANDLER_SUFFIX
from dirrouter.domain.models import EmittedArtifact

logger = logging.getLogger(__name__)

_OWNED_GLOB = f"*{HANDLER_SUFFIX}{GENERATED_SUFFIX}"


@dataclass(frozen=True)
class WriteResult:
    out_dir: str
    written: tuple[str, ...]
    unchanged: tuple[str, ...]
    removed: tuple[str, ...]


def _sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _atomic_write(path: Path, data: bytes) -> None:
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def write_artifacts(out_dir: Path, artifacts: Iterable[EmittedArtifact]) -> WriteResult:
    """
    Make out_dir hold exactly the given artifacts.

    - unchanged files (same sha256) are left alone so mtimes stay stable
    - handler files from earlier passes with no current artifact are removed
    - only files matching *Handler.g.cs are ever touched
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    written: list[str] = []
    unchanged: list[str] = []
    current: set[str] = set()

    for artifact in sorted(artifacts, key=lambda a: a.file_name):
        target = out_dir / artifact.file_name
        data = artifact.source_text.encode("utf-8")
        current.add(artifact.file_name)

        if target.exists() and _sha256_bytes(target.read_bytes()) == _sha256_bytes(data):
            unchanged.append(artifact.file_name)
            continue

        _atomic_write(target, data)
        written.append(artifact.file_name)
        logger.debug("Wrote %s", target)

    removed: list[str] = []
    for stale in sorted(out_dir.glob(_OWNED_GLOB)):
        if stale.name in current:
            continue
        stale.unlink()
        removed.append(stale.name)
        logger.info("Removed stale artifact %s", stale)

    return WriteResult(
        out_dir=str(out_dir),
        written=tuple(written),
        unchanged=tuple(unchanged),
        removed=tuple(removed),
    )
