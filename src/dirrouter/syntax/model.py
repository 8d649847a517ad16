from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

MemberSyntaxKind = Literal["method", "constructor", "other"]


@dataclass(frozen=True)
class ParameterSyntax:
    name: str
    raw: str                                # [FromQuery] int? age
    annotations: tuple[str, ...] = ()       # ("[FromQuery]",)
    type_text: str = ""                     # int?


@dataclass(frozen=True)
class MemberSyntax:
    """
    A member declared in a type body, reduced to text.

    raw_text is the full declaration (attributes included) and is what gets
    re-emitted for members that are not routed handlers.
    """

    kind: MemberSyntaxKind
    raw_text: str
    name: str = ""
    annotations: tuple[str, ...] = ()
    modifiers: tuple[str, ...] = ()
    return_type: str = ""
    parameter_list: str = ""                # "(string driverId, [FromQuery] int? age)"
    parameters: tuple[ParameterSyntax, ...] = ()
    body: str = ""                          # "{ ... }" or "=> expr;"


@dataclass(frozen=True)
class TypeSyntax:
    name: str
    annotations: tuple[str, ...] = ()
    # Parameter list written on the declaration itself (primary constructor).
    primary_parameters: Optional[tuple[ParameterSyntax, ...]] = None
    members: tuple[MemberSyntax, ...] = ()


@dataclass(frozen=True)
class UnitSyntax:
    """
    What the pipeline needs from one parsed source file.

    Parser adapters (see dirrouter.syntax.csharp) project their concrete
    trees into this shape; tests build it directly.
    """

    imports: tuple[str, ...] = ()
    file_scoped_namespace: Optional[str] = None
    block_namespace: Optional[str] = None
    types: tuple[TypeSyntax, ...] = ()
