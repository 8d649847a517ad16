from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_OUT_DIR = Path("Generated") / "DirRouter"


class GenerateOptions(BaseModel):
    """Host-side settings for one generation pass over a project tree."""

    project_root: Path
    out_dir: Optional[Path] = None          # default: <project_root>/Generated/DirRouter
    max_workers: Optional[int] = Field(default=None, ge=1)
    max_files: Optional[int] = Field(default=None, ge=1)
    write: bool = True

    def resolved_out_dir(self) -> Path:
        if self.out_dir is None:
            return (self.project_root / DEFAULT_OUT_DIR).resolve()
        out = self.out_dir.expanduser()
        if not out.is_absolute():
            out = self.project_root / out
        return out.resolve()
