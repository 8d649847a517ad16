from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Optional

from dirrouter.config import GenerateOptions
from dirrouter.conventions import MISSING_NAMESPACE
from dirrouter.domain.models import (
    DUPLICATE_HANDLER,
    MALFORMED_ROUTE,
    STRUCTURAL_ANOMALY,
    CandidateUnit,
    Diagnostic,
    PassResult,
    SourceUnit,
    UnitResult,
)
from dirrouter.emit.controller import emit_artifact
from dirrouter.errors import MalformedRouteError, PassCancelledError, UnitParseError
from dirrouter.extractors.endpoints import extract_shape
from dirrouter.output.writer import WriteResult, write_artifacts
from dirrouter.repo.discovery import discover_candidates
from dirrouter.repo.scanner import scan_csharp_files
from dirrouter.routing.decoder import build_route_spec, decode_route
from dirrouter.syntax.csharp import parse_csharp_file
from dirrouter.validation.binding import validate_bindings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateResult:
    project_root: str
    files_scanned: int
    candidates: int
    passed: PassResult
    written: Optional[WriteResult]  # None when the pass was not written out


def process_candidate(candidate: CandidateUnit) -> UnitResult:
    """decode -> extract -> validate -> emit, for a single unit."""
    path = candidate.file_path

    try:
        raw = decode_route(path)
    except MalformedRouteError as exc:
        return UnitResult(
            file_path=path,
            diagnostics=(Diagnostic(code=MALFORMED_ROUTE, message=str(exc), file_path=path),),
        )
    if not raw:
        logger.debug("Skipping %s: not laid out as a route unit", path)
        return UnitResult(file_path=path, skipped=True)

    route = build_route_spec(raw)
    shape = extract_shape(candidate)

    if shape.namespace == MISSING_NAMESPACE:
        return UnitResult(
            file_path=path,
            route=route,
            diagnostics=(
                Diagnostic(
                    code=STRUCTURAL_ANOMALY,
                    message=f"Endpoints type in '{path}' is not declared inside a namespace",
                    file_path=path,
                ),
            ),
        )

    mismatch = validate_bindings(route, shape.members, file_path=path)
    if mismatch is not None:
        return UnitResult(file_path=path, route=route, diagnostics=(mismatch,))

    return UnitResult(file_path=path, route=route, artifact=emit_artifact(shape, route))


def _reject_duplicates(results: list[UnitResult]) -> list[UnitResult]:
    # results are already in path order, so the earlier unit keeps its name
    owners: dict[str, str] = {}
    folded: dict[str, tuple[str, str]] = {}
    out: list[UnitResult] = []
    for r in results:
        if r.artifact is None:
            out.append(r)
            continue
        name = r.artifact.file_name
        owner = owners.get(name)
        if owner is None:
            owners[name] = r.file_path
            clash = folded.setdefault(name.casefold(), (name, r.file_path))
            if clash[0] != name:
                r = _with_case_warning(r, clash)
            out.append(r)
            continue
        out.append(
            UnitResult(
                file_path=r.file_path,
                route=r.route,
                diagnostics=(
                    Diagnostic(
                        code=DUPLICATE_HANDLER,
                        message=(
                            f"Handler file '{r.artifact.file_name}' derived from '{r.file_path}' "
                            f"collides with '{owner}'"
                        ),
                        file_path=r.file_path,
                    ),
                ),
            )
        )
    return out


def _with_case_warning(r: UnitResult, clash: tuple[str, str]) -> UnitResult:
    # both still emit; only case-insensitive file systems cannot hold the pair
    other_name, other_path = clash
    warning = Diagnostic(
        code=DUPLICATE_HANDLER,
        severity="warning",
        message=(
            f"Handler file '{r.artifact.file_name}' derived from '{r.file_path}' differs only in case "
            f"from '{other_name}' ('{other_path}'); the two collide on case-insensitive file systems"
        ),
        file_path=r.file_path,
    )
    return replace(r, diagnostics=r.diagnostics + (warning,))


def run_pass(
    units: Iterable[SourceUnit],
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> PassResult:
    """
    One generation pass over the full unit inventory.

    Units are processed independently (in parallel when max_workers > 1);
    a failing unit only affects its own result. If `cancel` is set before the
    pass completes, PassCancelledError is raised and nothing is returned.
    """
    candidates = discover_candidates(units)
    logger.info("Discovered %d candidate unit(s)", len(candidates))

    def _run(candidate: CandidateUnit) -> UnitResult:
        if cancel is not None and cancel.is_set():
            raise PassCancelledError("generation pass cancelled")
        return process_candidate(candidate)

    if max_workers is not None and max_workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(_run, candidates))
    else:
        results = [_run(c) for c in candidates]

    if cancel is not None and cancel.is_set():
        raise PassCancelledError("generation pass cancelled")

    results.sort(key=lambda r: r.file_path)
    results = _reject_duplicates(results)

    for r in results:
        for d in r.diagnostics:
            logger.info("%s %s: %s", d.code, d.file_path, d.message)

    return PassResult(results=tuple(results))


def load_source_units(
    project_root: Path,
    max_files: int | None = None,
    exclude_dirs: Iterable[Path] = (),
) -> list[SourceUnit]:
    """
    Host boundary: scan and parse every .cs file under project_root.
    Unreadable files are logged and left out; they never abort the pass.
    file_path is kept relative to the root (forward slashes), so route
    decoding never sees directories above the project.
    """
    project_root = project_root.resolve()
    units: list[SourceUnit] = []
    for p in scan_csharp_files(project_root, max_files=max_files, exclude_dirs=exclude_dirs):
        rel = os.path.relpath(p, str(project_root)).replace(os.sep, "/")
        try:
            syntax = parse_csharp_file(Path(p))
        except UnitParseError as exc:
            logger.warning("Skipping %s: %s", rel, exc)
            continue
        units.append(SourceUnit(file_path=rel, syntax=syntax))
    return units


def run_generate(options: GenerateOptions, cancel: threading.Event | None = None) -> GenerateResult:
    project_root = options.project_root.resolve()
    out_dir = options.resolved_out_dir()

    units = load_source_units(project_root, max_files=options.max_files, exclude_dirs=[out_dir])
    passed = run_pass(units, max_workers=options.max_workers, cancel=cancel)

    written: Optional[WriteResult] = None
    if options.write:
        written = write_artifacts(out_dir, passed.artifacts)

    return GenerateResult(
        project_root=str(project_root),
        files_scanned=len(units),
        candidates=len(passed.results),
        passed=passed,
        written=written,
    )
