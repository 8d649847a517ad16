from __future__ import annotations

from typing import Literal

# Directory that roots the route tree, and the unit file/type it must contain.
ROUTES_FOLDER = "Routes"
ENDPOINTS_FILE = "Endpoints.cs"
ENDPOINTS_TYPE = "Endpoints"

Verb = Literal["Get", "Post", "Put", "Delete"]
VERBS: tuple[Verb, ...] = ("Get", "Post", "Put", "Delete")

ROOT_NAME = "Root"
HANDLER_SUFFIX = "Handler"
GENERATED_SUFFIX = ".g.cs"
HANDLER_BASE_TYPE = "Controller"
GENERATED_HEADER = "// <auto-generated />"

# Returned by the extractor when a unit has no namespace; must never be emitted.
MISSING_NAMESPACE = "<missing-namespace>"

# Parameter attributes that bind from somewhere other than the route.
NON_ROUTE_BINDINGS = frozenset(
    {
        "FromBody",
        "FromQuery",
        "FromHeader",
        "FromForm",
        "FromServices",
        "FromKeyedServices",
    }
)

# Parameter types the host framework injects on its own.
FRAMEWORK_INJECTED_TYPES = frozenset(
    {
        "CancellationToken",
        "HttpContext",
        "HttpRequest",
        "HttpResponse",
        "ClaimsPrincipal",
    }
)
