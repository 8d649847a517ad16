from __future__ import annotations

from typing import Optional

from dirrouter.conventions import MISSING_NAMESPACE, VERBS, Verb
from dirrouter.domain.models import CandidateUnit, ConstructorKind, ExtractedShape, Member, Parameter
from dirrouter.syntax.model import MemberSyntax, ParameterSyntax, TypeSyntax, UnitSyntax


def extract_shape(candidate: CandidateUnit) -> ExtractedShape:
    """
    Project a candidate's syntax onto the pieces the emitter needs.

    Namespace falls back to MISSING_NAMESPACE rather than "", so callers can
    tell a structural anomaly apart from a legitimately empty value.
    """
    kind, ctor_params = constructor_shape(candidate.type)
    return ExtractedShape(
        imports=tuple(candidate.unit.imports),
        namespace=namespace_of(candidate.unit),
        class_annotations=tuple(candidate.type.annotations),
        constructor_kind=kind,
        constructor_params=ctor_params,
        members=tuple(_member(m) for m in candidate.type.members),
    )


def namespace_of(unit: UnitSyntax) -> str:
    return unit.file_scoped_namespace or unit.block_namespace or MISSING_NAMESPACE


def constructor_shape(type_syntax: TypeSyntax) -> tuple[ConstructorKind, tuple[str, ...]]:
    for m in type_syntax.members:
        if m.kind == "constructor":
            return ("traditional", tuple(p.raw for p in m.parameters))

    if type_syntax.primary_parameters:
        return ("shorthand", tuple(p.raw for p in type_syntax.primary_parameters))

    return ("none", ())


def verb_of(name: str) -> Optional[Verb]:
    for verb in VERBS:
        if name == verb:
            return verb
    return None


def _parameter(p: ParameterSyntax) -> Parameter:
    return Parameter(name=p.name, raw=p.raw, annotations=p.annotations, type_text=p.type_text)


def _member(m: MemberSyntax) -> Member:
    if m.kind == "other":
        return Member(kind="other", raw_text=m.raw_text)

    return Member(
        kind=m.kind,
        raw_text=m.raw_text,
        name=m.name,
        verb=verb_of(m.name) if m.kind == "method" else None,
        parameters=tuple(_parameter(p) for p in m.parameters),
        parameter_list=m.parameter_list,
        annotations=m.annotations,
        modifiers=m.modifiers,
        return_type=m.return_type,
        body=m.body,
    )
