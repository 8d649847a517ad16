import textwrap
import threading
from pathlib import Path

import pytest

from dirrouter.domain.models import (
    DUPLICATE_HANDLER,
    MALFORMED_ROUTE,
    PARAMETER_BINDING_MISMATCH,
    STRUCTURAL_ANOMALY,
    SourceUnit,
)
from dirrouter.errors import PassCancelledError
from dirrouter.orchestrator.pipeline import load_source_units, run_pass
from dirrouter.syntax.model import MemberSyntax, ParameterSyntax, TypeSyntax, UnitSyntax


def get_member(*param_names: str) -> MemberSyntax:
    params = tuple(ParameterSyntax(name=p, raw=f"string {p}", type_text="string") for p in param_names)
    return MemberSyntax(
        kind="method",
        raw_text="",
        name="Get",
        modifiers=("public",),
        return_type="IResult",
        parameter_list="(" + ", ".join(p.raw for p in params) + ")",
        parameters=params,
        body="{ }",
    )


def endpoints_unit(path: str, *members: MemberSyntax, namespace: str | None = "N") -> SourceUnit:
    return SourceUnit(
        file_path=path,
        syntax=UnitSyntax(
            file_scoped_namespace=namespace,
            types=(TypeSyntax(name="Endpoints", members=members),),
        ),
    )


def test_binding_mismatch_only_suppresses_its_own_unit():
    units = [
        endpoints_unit("Routes/Drivers/[id]/Endpoints.cs", get_member("identifier")),
        endpoints_unit("Routes/Cars/[id]/Endpoints.cs", get_member("id")),
    ]
    result = run_pass(units)

    assert [a.file_name for a in result.artifacts] == ["CarsidHandler.g.cs"]
    assert [d.code for d in result.diagnostics] == [PARAMETER_BINDING_MISMATCH]
    assert result.diagnostics[0].file_path == "Routes/Drivers/[id]/Endpoints.cs"
    assert not result.ok


def test_missing_namespace_is_reported_and_never_emitted():
    result = run_pass([endpoints_unit("Routes/Endpoints.cs", get_member(), namespace=None)])
    assert result.artifacts == []
    assert [d.code for d in result.diagnostics] == [STRUCTURAL_ANOMALY]


def test_malformed_route_is_reported():
    result = run_pass([endpoints_unit("Routes/[id/Endpoints.cs", get_member("id"))])
    assert result.artifacts == []
    assert [d.code for d in result.diagnostics] == [MALFORMED_ROUTE]


def test_convention_mismatch_is_skipped_silently():
    result = run_pass([endpoints_unit("Routes/Drivers/Other.cs", get_member())])
    assert result.artifacts == []
    assert result.diagnostics == []
    assert result.results[0].skipped
    assert result.ok


def test_duplicate_handler_names_keep_the_first_unit():
    units = [
        endpoints_unit("Routes/ab/Endpoints.cs", get_member()),
        endpoints_unit("Routes/a/b/Endpoints.cs", get_member()),
    ]
    result = run_pass(units)

    assert len(result.artifacts) == 1
    assert result.results[0].file_path == "Routes/a/b/Endpoints.cs"
    assert result.results[0].artifact is not None
    assert [d.code for d in result.diagnostics] == [DUPLICATE_HANDLER]
    assert result.diagnostics[0].file_path == "Routes/ab/Endpoints.cs"


def test_handler_names_differing_only_in_case_emit_with_a_warning():
    units = [
        endpoints_unit("Routes/Drivers/Endpoints.cs", get_member()),
        endpoints_unit("Routes/drivers/Endpoints.cs", get_member()),
    ]
    result = run_pass(units)

    assert [a.file_name for a in result.artifacts] == ["DriversHandler.g.cs", "driversHandler.g.cs"]
    assert [(d.code, d.severity) for d in result.diagnostics] == [(DUPLICATE_HANDLER, "warning")]
    assert result.diagnostics[0].file_path == "Routes/drivers/Endpoints.cs"
    assert "DriversHandler.g.cs" in result.diagnostics[0].message
    assert result.ok


def test_parallel_pass_matches_sequential_pass():
    units = [endpoints_unit(f"Routes/R{i}/[id]/Endpoints.cs", get_member("id")) for i in range(12)]
    sequential = run_pass(units)
    parallel = run_pass(units, max_workers=4)
    assert sequential == parallel
    assert len(parallel.artifacts) == 12


def test_cancelled_pass_surfaces_nothing():
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(PassCancelledError):
        run_pass([endpoints_unit("Routes/Endpoints.cs", get_member())], cancel=cancel)


def test_pass_is_deterministic():
    units = [endpoints_unit("Routes/Endpoints.cs", get_member())]
    assert run_pass(units).artifacts == run_pass(units).artifacts


def write(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(s), encoding="utf-8")


def test_non_utf8_sibling_file_does_not_abort_the_pass(tmp_path: Path):
    write(
        tmp_path / "Routes" / "Endpoints.cs",
        """
        namespace Web.Routes;

        public class Endpoints
        {
            public IResult Get() => Results.Ok();
        }
        """,
    )
    legacy = tmp_path / "Legacy" / "Labels.cs"
    legacy.parent.mkdir(parents=True)
    legacy.write_bytes("namespace Legacy;\n// café naïve\npublic class Labels { }\n".encode("latin-1"))

    units = load_source_units(tmp_path)

    assert [u.file_path for u in units] == ["Legacy/Labels.cs", "Routes/Endpoints.cs"]
    assert units[0].syntax.file_scoped_namespace == "Legacy"
    result = run_pass(units)
    assert [a.file_name for a in result.artifacts] == ["RootHandler.g.cs"]
    assert result.ok


def test_utf8_bom_is_not_part_of_the_first_token(tmp_path: Path):
    path = tmp_path / "Routes" / "Endpoints.cs"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\xef\xbb\xbfusing System;\nnamespace Web.Routes;\npublic class Endpoints { }\n")

    (unit,) = load_source_units(tmp_path)

    assert unit.syntax.imports == ("using System;",)
    assert unit.syntax.file_scoped_namespace == "Web.Routes"
