from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from dirrouter.errors import UnitParseError
from dirrouter.syntax.model import MemberSyntax, ParameterSyntax, TypeSyntax, UnitSyntax

logger = logging.getLogger(__name__)

_LANGUAGE = "csharp"
_PARAMETER_NODES = ("parameter", "parameter_array")


def parse_csharp_source(source: str | bytes, file_path: str = "<memory>") -> UnitSyntax:
    """
    Parse C# source with tree-sitter and project it onto UnitSyntax.

    Uses the concrete tree read-only; nothing is compiled or evaluated.
    """
    src = source.encode("utf-8") if isinstance(source, str) else source
    tree = get_parser(_LANGUAGE).parse(src)
    root = tree.root_node
    if root.has_error:
        logger.warning("Syntax errors in %s; extraction is best-effort", file_path)

    imports: list[str] = []
    file_ns: Optional[str] = None
    block_ns: Optional[str] = None
    types: list[TypeSyntax] = []

    for node in _descendants(root):
        if node.type == "using_directive":
            imports.append(_text(node, src))
        elif node.type == "file_scoped_namespace_declaration" and file_ns is None:
            file_ns = _field_text(node, "name", src)
        elif node.type == "namespace_declaration" and block_ns is None:
            block_ns = _field_text(node, "name", src)
        elif node.type == "class_declaration":
            types.append(_type_syntax(node, src))

    return UnitSyntax(
        imports=tuple(imports),
        file_scoped_namespace=file_ns,
        block_namespace=block_ns,
        types=tuple(types),
    )


def parse_csharp_file(path: Path) -> UnitSyntax:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise UnitParseError(f"Cannot read source unit: {path}") from exc
    # legacy code pages (Windows-1252, Latin-1) must not abort the pass
    text = data.decode("utf-8-sig", errors="replace")
    return parse_csharp_source(text, file_path=str(path))


def _descendants(node: Node) -> Iterator[Node]:
    # preorder, so results follow source order
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _text(node: Node, src: bytes) -> str:
    return src[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _field_text(node: Node, field: str, src: bytes) -> Optional[str]:
    child = node.child_by_field_name(field)
    return _text(child, src) if child is not None else None


def _children_of_type(node: Node, *types: str) -> list[Node]:
    return [c for c in node.children if c.type in types]


def _type_syntax(node: Node, src: bytes) -> TypeSyntax:
    primary: Optional[tuple[ParameterSyntax, ...]] = None
    param_lists = _children_of_type(node, "parameter_list")
    if param_lists:
        primary = _parameters(param_lists[0], src)

    body = node.child_by_field_name("body")
    if body is None:
        bodies = _children_of_type(node, "declaration_list")
        body = bodies[0] if bodies else None

    members: tuple[MemberSyntax, ...] = ()
    if body is not None:
        members = tuple(_member_syntax(c, src) for c in body.named_children if c.type != "comment")

    return TypeSyntax(
        name=_field_text(node, "name", src) or "",
        annotations=tuple(_text(a, src) for a in _children_of_type(node, "attribute_list")),
        primary_parameters=primary,
        members=members,
    )


def _member_syntax(node: Node, src: bytes) -> MemberSyntax:
    raw = _text(node, src)
    if node.type not in ("method_declaration", "constructor_declaration"):
        return MemberSyntax(kind="other", raw_text=raw)

    params_node = node.child_by_field_name("parameters")
    if params_node is None:
        found = _children_of_type(node, "parameter_list")
        params_node = found[0] if found else None

    common = dict(
        raw_text=raw,
        name=_field_text(node, "name", src) or "",
        annotations=tuple(_text(a, src) for a in _children_of_type(node, "attribute_list")),
        modifiers=tuple(_text(m, src) for m in _children_of_type(node, "modifier")),
        parameter_list=_text(params_node, src) if params_node is not None else "()",
        parameters=_parameters(params_node, src) if params_node is not None else (),
        body=_body_text(node, src),
    )
    if node.type == "constructor_declaration":
        return MemberSyntax(kind="constructor", **common)

    # "returns" on current grammars, "type" on older ones
    returns = node.child_by_field_name("returns") or node.child_by_field_name("type")
    return MemberSyntax(
        kind="method",
        return_type=_text(returns, src) if returns is not None else "",
        **common,
    )


def _body_text(node: Node, src: bytes) -> str:
    body = node.child_by_field_name("body")
    if body is None:
        found = _children_of_type(node, "block", "arrow_expression_clause")
        body = found[0] if found else None
    if body is None:
        return ""
    if body.type == "arrow_expression_clause":
        return _text(body, src) + ";"
    return _text(body, src)


def _parameters(param_list: Node, src: bytes) -> tuple[ParameterSyntax, ...]:
    out: list[ParameterSyntax] = []
    for p in param_list.named_children:
        if p.type not in _PARAMETER_NODES:
            continue
        name = _field_text(p, "name", src)
        if name is None:
            idents = _children_of_type(p, "identifier")
            name = _text(idents[-1], src) if idents else ""
        out.append(
            ParameterSyntax(
                name=name,
                raw=_text(p, src),
                annotations=tuple(_text(a, src) for a in _children_of_type(p, "attribute_list")),
                type_text=_field_text(p, "type", src) or "",
            )
        )
    return tuple(out)
