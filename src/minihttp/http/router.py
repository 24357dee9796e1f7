"""
=============================================================================
ROUTING TABLE
=============================================================================

Maps (Method, path) pairs to handler functions. EXACT MATCH ONLY:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Installed table                     Incoming            Result    │
    │   ───────────────                     ────────            ──────    │
    │   (GET,  "/")       → index           GET /               index     │
    │   (GET,  "/users")  → list_users      GET /users          list_users│
    │   (POST, "/users")  → create_user     GET /users/         not found │
    │                                       GET /users?page=2   not found │
    │                                       PUT /users          not found │
    └─────────────────────────────────────────────────────────────────────┘

No trailing-slash normalization, no wildcards, no prefixes: the key is the
request-target exactly as the client sent it.

=============================================================================
SNAPSHOTS AND ATOMIC INSTALL
=============================================================================

The router never edits the table that lookups are reading. It builds a new
dict, wraps it read-only, and swaps one reference:

    install_new_configuration(table)

        old snapshot ─────┐
                          │   self._snapshot = new_snapshot   (one store)
        new snapshot ─────┘

    A lookup that started before the swap finishes against the old table;
    one that starts after sees only the new table. There is no moment at
    which a mix of the two is visible, and a route that only existed in the
    old table can never be returned after the swap.

add_route() is copy-on-write on top of the same mechanism; a lock keeps two
writers from losing each other's route. Readers never take the lock.

=============================================================================
"""

from types import MappingProxyType
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union
import logging
import threading

from .methods import Method, method_from_str
from .request import Request
from .response import Response
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


# A handler mutates the response it is given; its return value is ignored.
Handler = Callable[[Request, Response], None]
RouteKey = Tuple[Method, str]


def _make_key(method: Union[Method, str], path: str) -> RouteKey:
    if not isinstance(method, Method):
        method = method_from_str(method)
    if not isinstance(path, str) or not path:
        raise ValueError(f"Route path must be a non-empty string, got {path!r}")
    return method, path


def default_not_found(request: Request, response: Response) -> None:
    """Fallback used when no route matches."""
    response.set_status(HTTPStatus.NOT_FOUND).json(
        {"error": f"No route matches {request.method} {request.path}"}
    )


class RouteTable:
    """
    A set of routes waiting to be installed.

    Build it with add() or the decorators, then hand it to
    Router.install_new_configuration(). The router copies it, so changing
    the table afterwards does not affect the installed routes.

        table = RouteTable()

        @table.get("/")
        def index(request, response):
            response.text("Hello")

        router.install_new_configuration(table)
    """

    def __init__(self, routes: Optional[Mapping[Tuple[Union[Method, str], str], Handler]] = None):
        self._routes: Dict[RouteKey, Handler] = {}
        for (method, path), handler in (routes or {}).items():
            self.add(method, path, handler)

    def add(self, method: Union[Method, str], path: str, handler: Handler) -> "RouteTable":
        """Register handler for (method, path), replacing any previous one."""
        if not callable(handler):
            raise TypeError(f"Handler for {path!r} is not callable")
        self._routes[_make_key(method, path)] = handler
        return self

    def route(self, path: str, method: Union[Method, str] = Method.GET) -> Callable[[Handler], Handler]:
        """Decorator form of add()."""
        def decorator(handler: Handler) -> Handler:
            self.add(method, path, handler)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.GET)

    def post(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.POST)

    def put(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.PUT)

    def delete(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.DELETE)

    def options(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.OPTIONS)

    def head(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.HEAD)

    def trace(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.TRACE)

    def connect(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.CONNECT)

    def items(self):
        return self._routes.items()

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, key: object) -> bool:
        return key in self._routes

    def __iter__(self) -> Iterator[RouteKey]:
        return iter(self._routes)


class Router:
    """
    Holds the installed routing snapshot and answers lookups.

    Lookups:
        router.lookup(Method.GET, "/")    → handler or None
        router.resolve(Method.GET, "/")   → handler or the not-found handler
        router[(Method.GET, "/")]         → same as resolve()
    """

    def __init__(
        self,
        routes: Union[RouteTable, Mapping, None] = None,
        not_found_handler: Handler = default_not_found,
    ):
        self.not_found_handler = not_found_handler
        self._write_lock = threading.Lock()
        self._snapshot: Mapping[RouteKey, Handler] = MappingProxyType({})
        if routes is not None:
            self.install_new_configuration(routes)

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def install_new_configuration(self, routes: Union[RouteTable, Mapping]) -> None:
        """
        Replace the whole routing table at once.

        Every previous entry is dropped; after this returns a lookup resolves
        only against `routes`.
        """
        table = routes if isinstance(routes, RouteTable) else RouteTable(routes)
        snapshot = MappingProxyType(dict(table.items()))

        with self._write_lock:
            self._snapshot = snapshot

        logger.debug(f"Installed routing table with {len(snapshot)} routes")

    def add_route(self, method: Union[Method, str], path: str, handler: Handler) -> None:
        """Add or replace a single route (copy-on-write)."""
        if not callable(handler):
            raise TypeError(f"Handler for {path!r} is not callable")
        key = _make_key(method, path)

        with self._write_lock:
            routes = dict(self._snapshot)
            routes[key] = handler
            self._snapshot = MappingProxyType(routes)

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def lookup(self, method: Method, path: str) -> Optional[Handler]:
        """Exact-match lookup; None when there is no route."""
        return self._snapshot.get((method, path))

    def resolve(self, method: Method, path: str) -> Handler:
        """Like lookup(), but falls back to the not-found handler."""
        handler = self.lookup(method, path)
        if handler is None:
            return self.not_found_handler
        return handler

    def __getitem__(self, key: RouteKey) -> Handler:
        method, path = key
        return self.resolve(method, path)

    def __len__(self) -> int:
        return len(self._snapshot)

    @property
    def snapshot(self) -> Mapping[RouteKey, Handler]:
        """The currently installed (read-only) table."""
        return self._snapshot

    def routes(self) -> List[RouteKey]:
        return list(self._snapshot)

    # =========================================================================
    # DECORATOR-STYLE REGISTRATION
    # =========================================================================

    def route(self, path: str, method: Union[Method, str] = Method.GET) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.add_route(method, path, handler)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.GET)

    def post(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.POST)

    def put(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.PUT)

    def delete(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.DELETE)

    def options(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.OPTIONS)

    def head(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.HEAD)

    def trace(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.TRACE)

    def connect(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, Method.CONNECT)

    def describe(self) -> List[str]:
        """One "METHOD path" line per route, sorted; used in the startup log."""
        return [f"{method.value:8} {path}" for method, path in sorted(
            self._snapshot, key=lambda key: (key[1], key[0].value)
        )]
