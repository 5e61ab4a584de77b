"""Route table for the task API.

Routes are tried in order and the first match wins. A ``{name}``
placeholder matches a single path segment, which may be empty; empty
segments produce no parameter so the operation can reject the request.
"""

import re
from dataclasses import dataclass, field

from task_api.router.responses import ApiRequest

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class Route:
    method: str
    template: str
    operation: str
    options: tuple[tuple[str, object], ...] = ()  # keyword arguments for the operation
    requires: tuple[str, ...] = ()  # path parameters that must be present
    excludes: tuple[str, ...] = ()  # path parameters that must be absent
    pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "pattern", compile_template(self.template))


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    path_parameters: dict[str, str]


def compile_template(template: str) -> re.Pattern:
    """Turn ``/api/task/{id}`` into an anchored regex with named groups."""
    parts = []
    pos = 0
    for m in _PLACEHOLDER.finditer(template):
        parts.append(re.escape(template[pos:m.start()]))
        parts.append(f"(?P<{m.group(1)}>[^/]*)")
        pos = m.end()
    parts.append(re.escape(template[pos:]))
    return re.compile("^" + "".join(parts) + "$")


ROUTES: tuple[Route, ...] = (
    Route("GET", "/api/task", "list", excludes=("id",)),
    Route("GET", "/api/task", "get", requires=("id",)),
    Route("GET", "/api/task/{id}", "get"),
    Route("POST", "/api/task", "create"),
    Route("PUT", "/api/task/{id}", "update", options=(("status", True),)),
    Route("PUT", "/api/undoTask/{id}", "update", options=(("status", False),)),
    Route("DELETE", "/api/deleteTask/{id}", "delete"),
)


def match_route(request: ApiRequest, routes: tuple[Route, ...] = ROUTES) -> RouteMatch | None:
    """Find the first route matching the request's method and path.

    Gateway-supplied path parameters are merged with the ones extracted
    from the template; non-empty extracted values take precedence.
    """
    method = request.method.upper()
    for route in routes:
        if route.method != method:
            continue
        m = route.pattern.match(request.path)
        if m is None:
            continue

        params = {k: v for k, v in (request.path_parameters or {}).items() if v}
        params.update({k: v for k, v in m.groupdict().items() if v})

        if any(name not in params for name in route.requires):
            continue
        if any(name in params for name in route.excludes):
            continue
        return RouteMatch(route=route, path_parameters=params)
    return None
