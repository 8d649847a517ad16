from __future__ import annotations


class DirRouterError(Exception):
    """Base class for host-side failures (never raised for per-unit diagnostics)."""


class MalformedRouteError(DirRouterError):
    def __init__(self, path: str, segment: str):
        super().__init__(f"Route segment '{segment}' in '{path}' is not a literal or a bracketed parameter")
        self.path = path
        self.segment = segment


class UnitParseError(DirRouterError):
    pass


class PassCancelledError(DirRouterError):
    pass
