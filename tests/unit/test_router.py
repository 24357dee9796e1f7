"""
Unit tests for the routing table and router.
"""

import json
import threading

import pytest

from minihttp.http.errors import UnknownMethodError
from minihttp.http.methods import Method
from minihttp.http.request import Request, parse_request
from minihttp.http.response import Response
from minihttp.http.router import RouteTable, Router, default_not_found


def dummy_handler(request: Request, response: Response) -> None:
    """Dummy handler for testing."""
    response.json({"path": request.path})


def other_handler(request: Request, response: Response) -> None:
    response.text("other")


class TestRouteTable:
    """Tests for the RouteTable builder."""

    def test_add(self):
        table = RouteTable().add(Method.GET, "/users", dummy_handler)
        assert (Method.GET, "/users") in table
        assert len(table) == 1

    def test_add_accepts_method_token(self):
        table = RouteTable().add("POST", "/users", dummy_handler)
        assert (Method.POST, "/users") in table

    def test_add_unknown_method(self):
        with pytest.raises(UnknownMethodError):
            RouteTable().add("PATCH", "/users", dummy_handler)

    def test_add_rejects_non_callable(self):
        with pytest.raises(TypeError):
            RouteTable().add(Method.GET, "/", "not a handler")

    def test_add_rejects_empty_path(self):
        with pytest.raises(ValueError):
            RouteTable().add(Method.GET, "", dummy_handler)

    def test_decorators(self):
        """Test one decorator per method."""
        table = RouteTable()
        for name in ("get", "post", "put", "delete", "options", "head", "trace", "connect"):
            getattr(table, name)("/x")(dummy_handler)

        assert set(table) == {(method, "/x") for method in Method}

    def test_decorator_returns_handler(self):
        table = RouteTable()
        assert table.get("/")(dummy_handler) is dummy_handler

    def test_from_mapping(self):
        table = RouteTable({(Method.GET, "/"): dummy_handler, ("PUT", "/a"): other_handler})
        assert (Method.PUT, "/a") in table


class TestRouter:
    """Tests for Router lookup and installation."""

    def test_lookup_exact(self):
        router = Router(RouteTable().add(Method.GET, "/users", dummy_handler))

        assert router.lookup(Method.GET, "/users") is dummy_handler
        assert router.lookup(Method.POST, "/users") is None

    @pytest.mark.parametrize("path", ["/users/", "/Users", "/users?page=2", "/users/1", "users"])
    def test_no_normalization(self, path: str):
        """Test that lookup is exact: no slashes, case, query or prefix games."""
        router = Router(RouteTable().add(Method.GET, "/users", dummy_handler))
        assert router.lookup(Method.GET, path) is None

    def test_query_in_route_key(self):
        router = Router(RouteTable().add(Method.GET, "/s?q=1", dummy_handler))
        assert router.lookup(Method.GET, "/s?q=1") is dummy_handler
        assert router.lookup(Method.GET, "/s") is None

    def test_resolve_falls_back_to_not_found(self):
        router = Router()
        assert router.resolve(Method.GET, "/missing") is default_not_found

    def test_getitem(self):
        router = Router(RouteTable().add(Method.GET, "/", dummy_handler))
        assert router[(Method.GET, "/")] is dummy_handler
        assert router[(Method.GET, "/nope")] is default_not_found

    def test_default_not_found_handler(self):
        request = parse_request(b"GET /missing HTTP/1.1\r\n")
        response = Response()

        default_not_found(request, response)

        assert response.status == 404
        assert "/missing" in json.loads(response.body)["error"]

    def test_custom_not_found_handler(self):
        router = Router(not_found_handler=other_handler)
        assert router.resolve(Method.GET, "/") is other_handler

    def test_reinstall_replaces_everything(self):
        """Test that a new configuration drops every old entry."""
        router = Router()
        router.install_new_configuration(
            RouteTable()
            .add(Method.GET, "/old", dummy_handler)
            .add(Method.GET, "/both", dummy_handler)
        )

        router.install_new_configuration(RouteTable().add(Method.GET, "/both", other_handler))

        assert router.resolve(Method.GET, "/old") is default_not_found
        assert router.resolve(Method.GET, "/both") is other_handler
        assert len(router) == 1

    def test_install_copies_table(self):
        """Test that editing the table after install has no effect."""
        table = RouteTable().add(Method.GET, "/", dummy_handler)
        router = Router(table)

        table.add(Method.GET, "/later", dummy_handler)

        assert router.lookup(Method.GET, "/later") is None

    def test_install_from_mapping(self):
        router = Router()
        router.install_new_configuration({(Method.GET, "/"): dummy_handler})
        assert router.lookup(Method.GET, "/") is dummy_handler

    def test_snapshot_is_read_only(self):
        router = Router(RouteTable().add(Method.GET, "/", dummy_handler))
        with pytest.raises(TypeError):
            router.snapshot[(Method.GET, "/x")] = dummy_handler

    def test_old_snapshot_unchanged_by_add_route(self):
        """Test copy-on-write: a reader holding the old snapshot keeps it."""
        router = Router(RouteTable().add(Method.GET, "/", dummy_handler))
        before = router.snapshot

        router.add_route(Method.GET, "/new", other_handler)

        assert (Method.GET, "/new") not in before
        assert router.lookup(Method.GET, "/new") is other_handler

    def test_decorator_registration(self):
        router = Router()

        @router.post("/items")
        def create(request, response):
            response.set_status(201)

        assert router.lookup(Method.POST, "/items") is create
        assert router.routes() == [(Method.POST, "/items")]

    def test_concurrent_add_route(self):
        """Test that concurrent writers do not lose each other's routes."""
        router = Router()

        def register(start: int):
            for i in range(start, start + 50):
                router.add_route(Method.GET, f"/r{i}", dummy_handler)

        threads = [threading.Thread(target=register, args=(n * 50,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(router) == 200

    def test_describe(self):
        router = Router(
            RouteTable()
            .add(Method.POST, "/b", dummy_handler)
            .add(Method.GET, "/a", dummy_handler)
        )
        lines = router.describe()
        assert lines[0].split() == ["GET", "/a"]
        assert lines[1].split() == ["POST", "/b"]
