from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Iterable

from dirrouter.conventions import ENDPOINTS_TYPE, ROUTES_FOLDER
from dirrouter.domain.models import CandidateUnit, SourceUnit

logger = logging.getLogger(__name__)


def is_under_routes(file_path: str) -> bool:
    parts = PurePosixPath(file_path.replace("\\", "/")).parts
    return ROUTES_FOLDER in parts[:-1]


def discover_candidates(units: Iterable[SourceUnit]) -> list[CandidateUnit]:
    """
    Select units that declare the endpoints type under the routes folder.
    Pure filter; keeps input order.
    """
    out: list[CandidateUnit] = []
    for unit in units:
        if not is_under_routes(unit.file_path):
            continue
        matches = [t for t in unit.syntax.types if t.name == ENDPOINTS_TYPE]
        if not matches:
            continue
        if len(matches) > 1:
            logger.debug("%s declares %d %s types; using the first", unit.file_path, len(matches), ENDPOINTS_TYPE)
        out.append(CandidateUnit(file_path=unit.file_path, unit=unit.syntax, type=matches[0]))
    return out
