from __future__ import annotations

import re

from dirrouter.conventions import ENDPOINTS_FILE, HANDLER_SUFFIX, ROOT_NAME, ROUTES_FOLDER
from dirrouter.domain.models import RouteSpec
from dirrouter.errors import MalformedRouteError

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_LITERAL_SEGMENT = re.compile(rf"^{_IDENT}$")
_PARAM_SEGMENT = re.compile(rf"^\[{_IDENT}\]$")


def decode_route(file_path: str) -> str:
    """
    Derive the raw route from a unit's location.

      .../Routes/Endpoints.cs                     -> /
      .../Routes/Drivers/[driverId]/Endpoints.cs  -> /Drivers/[driverId]

    Returns "" when the path is not laid out by convention (no routes folder,
    or a different file name). Raises MalformedRouteError for segments that
    are neither identifiers nor bracketed identifiers.
    """
    parts = [p for p in file_path.replace("\\", "/").split("/") if p]
    if not parts or parts[-1] != ENDPOINTS_FILE:
        return ""
    try:
        start = parts.index(ROUTES_FOLDER)
    except ValueError:
        return ""

    segments = parts[start + 1 : -1]
    for seg in segments:
        if not (_LITERAL_SEGMENT.match(seg) or _PARAM_SEGMENT.match(seg)):
            raise MalformedRouteError(file_path, seg)

    if not segments:
        return "/"
    return "/" + "/".join(segments)


def route_template(raw_path: str) -> str:
    return raw_path.replace("[", "{").replace("]", "}")


def param_segment(raw_path: str) -> str:
    # only the first bracketed segment binds; later ones are not inspected
    for seg in raw_path.split("/"):
        if seg.startswith("[") and seg.endswith("]"):
            return seg[1:-1]
    return ""


def build_route_spec(raw_path: str) -> RouteSpec:
    return RouteSpec(
        raw_path=raw_path,
        template=route_template(raw_path),
        param_segment=param_segment(raw_path),
    )


def handler_name(raw_path: str) -> str:
    # /Drivers/[driverId] -> DriversdriverIdHandler
    if raw_path == "/":
        base = ROOT_NAME
    else:
        base = raw_path.replace("/", "").replace("[", "").replace("]", "")
    return f"{base}{HANDLER_SUFFIX}"
