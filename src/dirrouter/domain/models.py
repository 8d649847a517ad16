from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from pydantic import BaseModel

from dirrouter.conventions import Verb
from dirrouter.syntax.model import TypeSyntax, UnitSyntax

Severity = Literal["error", "warning"]
ConstructorKind = Literal["traditional", "shorthand", "none"]
MemberKind = Literal["method", "constructor", "other"]

# Stable diagnostic codes
PARAMETER_BINDING_MISMATCH = "DR001"
STRUCTURAL_ANOMALY = "DR002"
MALFORMED_ROUTE = "DR003"
DUPLICATE_HANDLER = "DR004"


class Diagnostic(BaseModel):
    code: str
    severity: Severity = "error"
    message: str
    file_path: str = ""


@dataclass(frozen=True)
class SourceUnit:
    """One parsed source file, as handed over by the host."""

    file_path: str
    syntax: UnitSyntax


@dataclass(frozen=True)
class CandidateUnit:
    file_path: str
    unit: UnitSyntax
    type: TypeSyntax


@dataclass(frozen=True)
class RouteSpec:
    raw_path: str        # /Drivers/[driverId]
    template: str        # /Drivers/{driverId}
    param_segment: str   # driverId, or "" when the route has no parameter


@dataclass(frozen=True)
class Parameter:
    name: str
    raw: str
    annotations: tuple[str, ...] = ()
    type_text: str = ""


@dataclass(frozen=True)
class Member:
    kind: MemberKind
    raw_text: str
    name: str = ""
    verb: Optional[Verb] = None
    parameters: tuple[Parameter, ...] = ()
    parameter_list: str = ""
    annotations: tuple[str, ...] = ()
    modifiers: tuple[str, ...] = ()
    return_type: str = ""
    body: str = ""


@dataclass(frozen=True)
class ExtractedShape:
    imports: tuple[str, ...]
    namespace: str
    class_annotations: tuple[str, ...]
    constructor_kind: ConstructorKind
    constructor_params: tuple[str, ...]
    members: tuple[Member, ...]


@dataclass(frozen=True)
class EmittedArtifact:
    file_name: str
    source_text: str


@dataclass(frozen=True)
class UnitResult:
    """Outcome of one unit's pipeline; replaces any pass-wide error state."""

    file_path: str
    artifact: Optional[EmittedArtifact] = None
    diagnostics: tuple[Diagnostic, ...] = ()
    route: Optional[RouteSpec] = None
    skipped: bool = False


@dataclass(frozen=True)
class PassResult:
    results: tuple[UnitResult, ...] = field(default_factory=tuple)

    @property
    def artifacts(self) -> list[EmittedArtifact]:
        return [r.artifact for r in self.results if r.artifact is not None]

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for r in self.results for d in r.diagnostics]

    @property
    def ok(self) -> bool:
        return not any(d.severity == "error" for d in self.diagnostics)
