from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dirrouter.config import GenerateOptions
from dirrouter.domain.models import Diagnostic
from dirrouter.errors import MalformedRouteError
from dirrouter.orchestrator.pipeline import GenerateResult, load_source_units, run_generate
from dirrouter.repo.discovery import discover_candidates
from dirrouter.routing.decoder import build_route_spec, decode_route, handler_name


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _project_path(project: str) -> Path:
    project_path = Path(project).expanduser().resolve()
    if not project_path.exists():
        raise typer.BadParameter(f"Project path does not exist: {project_path}")
    if not project_path.is_dir():
        raise typer.BadParameter(f"Project path is not a directory: {project_path}")
    return project_path


def _check_format(format: str) -> str:
    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")
    return fmt


def _print_diagnostics(diagnostics: list[Diagnostic]) -> None:
    if not diagnostics:
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("CODE", no_wrap=True)
    table.add_column("SEVERITY", no_wrap=True)
    table.add_column("FILE")
    table.add_column("MESSAGE")
    for d in diagnostics:
        table.add_row(d.code, d.severity, escape(d.file_path), escape(d.message))
    console.print(table)


def _report(result: GenerateResult, fmt: str) -> None:
    passed = result.passed
    if fmt == "json":
        payload = {
            "project": result.project_root,
            "files_scanned": result.files_scanned,
            "candidates": result.candidates,
            "artifacts": [a.file_name for a in passed.artifacts],
            "diagnostics": [d.model_dump() for d in passed.diagnostics],
        }
        if result.written is not None:
            payload["out_dir"] = result.written.out_dir
            payload["written"] = list(result.written.written)
            payload["removed"] = list(result.written.removed)
        console.print_json(json.dumps(payload))
        return

    console.print(f"[bold green]dirrouter[/bold green]: {escape(result.project_root)}")
    console.print(f"C# files scanned: {result.files_scanned}")
    console.print(f"Candidate units: {result.candidates}")
    console.print(f"Handlers emitted: [bold]{len(passed.artifacts)}[/bold]")
    for r in passed.results:
        if r.artifact is not None and r.route is not None:
            console.print(f"  {r.route.template:<35} -> {r.artifact.file_name}")

    if result.written is not None:
        w = result.written
        console.print("")
        console.print(f"Output: {escape(w.out_dir)}")
        console.print(f"Written: {len(w.written)}  Unchanged: {len(w.unchanged)}  Removed: {len(w.removed)}")

    if passed.diagnostics:
        console.print("")
        _print_diagnostics(passed.diagnostics)


@app.command()
def generate(
    project: str = typer.Argument(..., help="Path to the project to generate handlers for"),
    out: Optional[str] = typer.Option(None, help="Output directory (default: <project>/Generated/DirRouter)"),
    workers: Optional[int] = typer.Option(None, help="Worker threads for the pass"),
    max_files: Optional[int] = typer.Option(None, help="Limit scanned files (debug)"),
    format: str = typer.Option("table", help="Output format: table|json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    _configure_logging(verbose)
    fmt = _check_format(format)
    options = GenerateOptions(
        project_root=_project_path(project),
        out_dir=Path(out) if out else None,
        max_workers=workers,
        max_files=max_files,
    )
    result = run_generate(options)
    _report(result, fmt)
    if not result.passed.ok:
        raise typer.Exit(code=1)


@app.command()
def check(
    project: str = typer.Argument(..., help="Path to the project to check"),
    format: str = typer.Option("table", help="Output format: table|json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run a generation pass without writing anything."""
    _configure_logging(verbose)
    fmt = _check_format(format)
    result = run_generate(GenerateOptions(project_root=_project_path(project), write=False))
    _report(result, fmt)
    if not result.passed.ok:
        raise typer.Exit(code=1)


@app.command()
def routes(
    project: str = typer.Argument(..., help="Path to the project"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    """List route units and the routes decoded from their location."""
    fmt = _check_format(format)
    project_path = _project_path(project)

    rows: list[dict[str, str]] = []
    for candidate in discover_candidates(load_source_units(project_path)):
        try:
            raw = decode_route(candidate.file_path)
        except MalformedRouteError as exc:
            rows.append({"file": candidate.file_path, "route": "", "template": "", "param": "", "handler": "", "error": str(exc)})
            continue
        if not raw:
            continue
        spec = build_route_spec(raw)
        rows.append(
            {
                "file": candidate.file_path,
                "route": spec.raw_path,
                "template": spec.template,
                "param": spec.param_segment,
                "handler": handler_name(spec.raw_path),
                "error": "",
            }
        )

    if fmt == "json":
        console.print_json(json.dumps(rows))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("TEMPLATE", no_wrap=True)
    table.add_column("PARAM", no_wrap=True)
    table.add_column("HANDLER")
    table.add_column("FILE")
    for r in rows:
        template = r["template"] or f"[red]{escape(r['error'])}[/red]"
        table.add_row(template, r["param"], r["handler"], escape(r["file"]))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
