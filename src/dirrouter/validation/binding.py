from __future__ import annotations

import re
from typing import Iterable, Optional

from dirrouter.conventions import FRAMEWORK_INJECTED_TYPES, NON_ROUTE_BINDINGS
from dirrouter.domain.models import PARAMETER_BINDING_MISMATCH, Diagnostic, Member, Parameter, RouteSpec

# [FromQuery], [FromQuery(Name = "x")], [Microsoft.AspNetCore.Mvc.FromBodyAttribute]
_ATTRIBUTE_NAME = re.compile(r"(?:^|[\[,])\s*(?:[A-Za-z_][\w]*\.)*([A-Za-z_]\w*?)(?:Attribute)?\s*(?=[\](,])")


def attribute_names(annotation: str) -> list[str]:
    return _ATTRIBUTE_NAME.findall(annotation)


def is_route_bindable(param: Parameter) -> bool:
    for annotation in param.annotations:
        if any(name in NON_ROUTE_BINDINGS for name in attribute_names(annotation)):
            return False
    base_type = param.type_text.rstrip("?").split(".")[-1]
    return base_type not in FRAMEWORK_INJECTED_TYPES


def validate_bindings(route: RouteSpec, members: Iterable[Member], file_path: str = "") -> Optional[Diagnostic]:
    """
    Check that verb members on a parameterised route bind the route segment.

    Only verb members that declare at least one route-bindable parameter are
    checked; one of those parameters must be named exactly like the segment.
    Returns the diagnostic for the first violation, or None.
    """
    if not route.param_segment:
        return None

    for m in members:
        if m.verb is None:
            continue
        bindable = [p for p in m.parameters if is_route_bindable(p)]
        if not bindable:
            continue
        if any(p.name == route.param_segment for p in m.parameters):
            continue
        return Diagnostic(
            code=PARAMETER_BINDING_MISMATCH,
            message=(
                f"None of the parameters '{m.parameter_list}' of '{m.name}' "
                f"match route segment '{route.param_segment}'"
            ),
            file_path=file_path,
        )
    return None
