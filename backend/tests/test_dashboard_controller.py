"""
Grievance Portal Backend — Dashboard Controller Tests
======================================================

What:  The dashboard's confirm flows against a scripted API and the real one.
How:   httpx.MockTransport answers with canned responses for unit tests; one
       end-to-end test drives the real app through ASGITransport.

What we test:
    ✅ load() populates state; a failed load leaves an empty list
    ✅ confirm_* patches state on success and leaves it unchanged on failure
    ✅ Create is refused locally for blank or over-long names
    ✅ copy_link builds the share URL and clears its indicator; a re-copy restarts it
"""

import asyncio
import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.dashboard.controller import DashboardController
from app.dashboard.store import resolved_messages

PERSON = {
    "id": "5c7d0a1e-0000-4000-8000-000000000001",
    "name": "Jane",
    "slug": "jane-aaaaaa",
    "userId": "5c7d0a1e-0000-4000-8000-0000000000ff",
    "createdAt": "2024-01-15T12:00:00Z",
    "messages": [
        {
            "id": "m1",
            "content": "Late",
            "emoji": "angry",
            "done": False,
            "createdAt": "2024-01-15T12:00:00Z",
            "expectedResponse": None,
            "personId": "5c7d0a1e-0000-4000-8000-000000000001",
        }
    ],
}


def _controller(handler, **kwargs) -> DashboardController:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api")
    return DashboardController(client, public_base_url="https://grievances.test", **kwargs)


def _api(calls, failing=()):
    """Scripted API: records every call and fails the (method, path) pairs in `failing`."""

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path, dict(request.url.params)))
        if (request.method, request.url.path) in failing:
            return httpx.Response(500, json={"error": "internal_server_error"})
        if request.method == "GET":
            return httpx.Response(200, json={"persons": [PERSON]})
        if request.method == "POST":
            name = json.loads(request.content)["name"]
            return httpx.Response(200, json={"persons": [dict(PERSON, name=name, slug="new-bbbbbb", messages=[])]})
        if request.method == "PATCH":
            return httpx.Response(200, json={"success": True, "message": dict(PERSON["messages"][0], done=True)})
        return httpx.Response(200, json={"success": True})

    return handler


class TestLoad:

    @pytest.mark.asyncio
    async def test_load(self):
        controller = _controller(_api([]))

        state = await controller.load()

        assert state.loading is False
        assert state.person("jane-aaaaaa").messages[0].content == "Late"

    @pytest.mark.asyncio
    async def test_failed_load_is_empty(self):
        controller = _controller(_api([], failing={("GET", "/api/person")}))

        state = await controller.load()

        assert state.loading is False
        assert state.persons == ()


class TestCreate:

    @pytest.mark.asyncio
    async def test_confirm_create(self):
        calls = []
        controller = _controller(_api(calls))
        await controller.load()
        controller.open_create()

        assert await controller.confirm_create("Bob") is True

        assert calls[-1][:2] == ("POST", "/api/person")
        assert controller.state.persons[-1].name == "Bob"
        assert controller.state.create_modal_open is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "x" * 25])
    async def test_invalid_name_never_sent(self, name):
        calls = []
        controller = _controller(_api(calls))
        controller.open_create()

        assert await controller.confirm_create(name) is False
        assert calls == []

    @pytest.mark.asyncio
    async def test_requires_open_modal(self):
        calls = []
        controller = _controller(_api(calls))

        assert await controller.confirm_create("Bob") is False
        assert calls == []

    @pytest.mark.asyncio
    async def test_failure_leaves_state(self):
        controller = _controller(_api([], failing={("POST", "/api/person")}))
        await controller.load()
        controller.open_create()
        before = controller.state

        assert await controller.confirm_create("Bob") is False

        assert controller.state == before
        assert controller.state.create_modal_open is True


class TestDelete:

    @pytest.mark.asyncio
    async def test_confirm_delete(self):
        calls = []
        controller = _controller(_api(calls))
        await controller.load()
        controller.open_delete("jane-aaaaaa")

        assert await controller.confirm_delete() is True

        assert calls[-1] == ("DELETE", "/api/person", {"slug": "jane-aaaaaa"})
        assert controller.state.persons == ()
        assert controller.state.delete_target is None

    @pytest.mark.asyncio
    async def test_nothing_pending(self):
        controller = _controller(_api([]))
        assert await controller.confirm_delete() is False

    @pytest.mark.asyncio
    async def test_failure_leaves_state(self):
        controller = _controller(_api([], failing={("DELETE", "/api/person")}))
        await controller.load()
        controller.open_delete("jane-aaaaaa")
        before = controller.state

        assert await controller.confirm_delete() is False
        assert controller.state == before


class TestResolve:

    @pytest.mark.asyncio
    async def test_confirm_resolve(self):
        calls = []
        controller = _controller(_api(calls))
        await controller.load()
        controller.open_resolve("m1", "jane-aaaaaa")

        assert await controller.confirm_resolve() is True

        assert calls[-1] == ("PATCH", "/api/message", {"id": "m1"})
        jane = controller.state.person("jane-aaaaaa")
        assert [m.id for m in resolved_messages(jane)] == ["m1"]
        assert controller.state.resolve_target is None

    @pytest.mark.asyncio
    async def test_failure_leaves_state(self):
        controller = _controller(_api([], failing={("PATCH", "/api/message")}))
        await controller.load()
        controller.open_resolve("m1", "jane-aaaaaa")
        before = controller.state

        assert await controller.confirm_resolve() is False
        assert controller.state == before

    @pytest.mark.asyncio
    async def test_transport_error_leaves_state(self):
        def handler(request):
            if request.method == "PATCH":
                raise httpx.ConnectError("connection refused", request=request)
            return _api([])(request)

        controller = _controller(handler)
        await controller.load()
        controller.open_resolve("m1", "jane-aaaaaa")
        before = controller.state

        assert await controller.confirm_resolve() is False
        assert controller.state == before


class TestShareLinks:

    @pytest.mark.asyncio
    async def test_copy_link_indicator_clears(self):
        controller = _controller(_api([]), copied_indicator_seconds=0.01)

        link = controller.copy_link("jane-aaaaaa")

        assert link == "https://grievances.test/share/jane-aaaaaa"
        assert controller.state.copied_link_slug == "jane-aaaaaa"
        await asyncio.sleep(0.05)
        assert controller.state.copied_link_slug is None

    @pytest.mark.asyncio
    async def test_recopy_restarts_indicator(self):
        controller = _controller(_api([]), copied_indicator_seconds=0.2)

        controller.copy_link("jane-aaaaaa")
        await asyncio.sleep(0.1)
        controller.copy_link("jane-aaaaaa")
        await asyncio.sleep(0.15)

        # Past the first copy's deadline, inside the second one's
        assert controller.state.copied_link_slug == "jane-aaaaaa"
        await asyncio.sleep(0.2)
        assert controller.state.copied_link_slug is None


class TestAgainstRealApi:

    @pytest.mark.asyncio
    async def test_full_owner_flow(self, api_app, owner, token_for, client):
        transport = ASGITransport(app=api_app)
        async with AsyncClient(
            transport=transport,
            base_url="http://test",
            headers={"Authorization": f"Bearer {token_for(owner)}"},
        ) as api:
            controller = DashboardController(api, public_base_url="https://grievances.test")
            await controller.load()
            assert controller.state.persons == ()

            controller.open_create()
            assert await controller.confirm_create("Jane Doe") is True
            slug = controller.state.persons[0].slug

            await client.post("/api/message", data={"content": "Late", "emoji": "angry", "slug": slug})
            await controller.load()
            message = controller.state.person(slug).messages[0]

            controller.open_resolve(message.id, slug)
            assert await controller.confirm_resolve() is True
            assert controller.state.person(slug).messages[0].done is True

            controller.open_delete(slug)
            assert await controller.confirm_delete() is True
            assert controller.state.persons == ()
