from __future__ import annotations

import re

from dirrouter.conventions import (
    ENDPOINTS_TYPE,
    GENERATED_HEADER,
    GENERATED_SUFFIX,
    HANDLER_BASE_TYPE,
    MISSING_NAMESPACE,
)
from dirrouter.domain.models import EmittedArtifact, ExtractedShape, Member, RouteSpec
from dirrouter.routing.decoder import handler_name

_TYPE_INDENT = " " * 4
_MEMBER_INDENT = " " * 8
_ENDPOINTS_IDENT = re.compile(rf"\b{ENDPOINTS_TYPE}\b")


def artifact_file_name(route: RouteSpec) -> str:
    return f"{handler_name(route.raw_path)}{GENERATED_SUFFIX}"


def emit_artifact(shape: ExtractedShape, route: RouteSpec) -> EmittedArtifact:
    return EmittedArtifact(
        file_name=artifact_file_name(route),
        source_text=render_handler_source(shape, route),
    )


def render_handler_source(shape: ExtractedShape, route: RouteSpec) -> str:
    """
    Render the handler (controller) source for one validated unit.

    Output depends only on (shape, route): no timestamps, no ordering that
    is not already in the input.
    """
    if shape.namespace == MISSING_NAMESPACE:
        raise ValueError("refusing to emit a unit without a namespace")

    name = handler_name(route.raw_path)
    ctor = ""
    if shape.constructor_kind == "shorthand":
        ctor = "(" + ", ".join(shape.constructor_params) + ")"

    lines: list[str] = [GENERATED_HEADER]
    lines.extend(shape.imports)
    lines.append("")
    lines.append(f"namespace {shape.namespace}")
    lines.append("{")
    for annotation in shape.class_annotations:
        lines.append(f"{_TYPE_INDENT}{annotation}")
    lines.append(f'{_TYPE_INDENT}[Route("{route.template}")]')
    lines.append(f"{_TYPE_INDENT}public class {name}{ctor} : {HANDLER_BASE_TYPE}")
    lines.append(f"{_TYPE_INDENT}{{")

    for i, member in enumerate(shape.members):
        if i:
            lines.append("")
        lines.extend(_member_lines(member, name))

    lines.append(f"{_TYPE_INDENT}}}")
    lines.append("}")
    return "\n".join(lines) + "\n"


def _member_lines(member: Member, name: str) -> list[str]:
    if member.verb is not None:
        return _verb_lines(member)
    if member.kind == "constructor":
        return _reindent(_ENDPOINTS_IDENT.sub(name, member.raw_text), _MEMBER_INDENT)
    return _reindent(member.raw_text, _MEMBER_INDENT)


def _verb_lines(member: Member) -> list[str]:
    out = [f"{_MEMBER_INDENT}{a}" for a in member.annotations]
    out.append(f"{_MEMBER_INDENT}[Http{member.verb}]")

    modifiers = " ".join(member.modifiers) or "public"
    signature = f"{modifiers} {member.return_type} {member.name}{member.parameter_list}"
    if member.body.startswith("=>"):
        out.append(f"{_MEMBER_INDENT}{signature} {member.body}")
    elif member.body:
        out.append(f"{_MEMBER_INDENT}{signature}")
        out.extend(_reindent(member.body, _MEMBER_INDENT))
    else:
        out.append(f"{_MEMBER_INDENT}{signature};")
    return out


def _reindent(text: str, indent: str) -> list[str]:
    """
    Move a multi-line source fragment under `indent`.

    The fragment's first line carries no leading whitespace (it starts where
    the syntax node starts); its last line is taken as the fragment's own
    column, so every following line is shifted by that delta.
    """
    lines = text.split("\n")
    last = lines[-1]
    column = len(last) - len(last.lstrip()) if len(lines) > 1 else 0

    out = [indent + lines[0]]
    for line in lines[1:]:
        if not line.strip():
            out.append("")
            continue
        lead = len(line) - len(line.lstrip())
        out.append(indent + line[min(lead, column):])
    return out
