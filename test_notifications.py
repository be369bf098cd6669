# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""Tests for stored notifications and the Socket.IO channel."""

from unittest.mock import AsyncMock, MagicMock

import anyio
import anyio.from_thread
import anyio.to_thread
import pytest
from fastapi.testclient import TestClient

from main import app
from taskhub.core.config import settings
from taskhub.core.dependencies import get_notification_service, get_user_repo, get_user_service
from taskhub.sockets.namespace import MainNamespace
from taskhub.sockets.server import SocketPublisher

client = TestClient(app)


def _notify(user, count=1):
    service = get_notification_service()
    for i in range(count):
        service.notify_user(user["id"], f"Message {i}", data={"n": i})


def _notify_on_next_lookup(user, monkeypatch):
    """Deliver a notification right after the next user lookup, as a concurrent request would."""
    repo = get_user_repo()
    lookup = repo.find_by_id

    def find_then_notify(user_id):
        doc = lookup(user_id)
        monkeypatch.setattr(repo, "find_by_id", lookup)
        get_notification_service().notify_user(user["id"], "arrived meanwhile")
        return doc

    monkeypatch.setattr(repo, "find_by_id", find_then_notify)


class TestStoredNotifications:
    def test_list_newest_first_with_unread_count(self, make_user):
        user = make_user()
        _notify(user, 3)
        data = client.get("/api/notifications", headers=user["headers"]).json()["data"]
        assert [n["message"] for n in data["items"]] == ["Message 2", "Message 1", "Message 0"]
        assert data["unreadCount"] == 3

    def test_list_is_capped(self, make_user, monkeypatch):
        monkeypatch.setattr(settings, "NOTIFICATION_HISTORY_LIMIT", 2)
        user = make_user()
        _notify(user, 4)
        data = client.get("/api/notifications", headers=user["headers"]).json()["data"]
        assert [n["message"] for n in data["items"]] == ["Message 3", "Message 2"]
        assert data["unreadCount"] == 2

    def test_stored_history_is_trimmed(self, make_user, monkeypatch, db):
        monkeypatch.setattr(settings, "NOTIFICATION_HISTORY_LIMIT", 5)
        user = make_user()
        _notify(user, 20)
        stored = db["users"].find_one({"_id": user["doc"]["_id"]})["notifications"]
        assert len(stored) == 5
        assert stored[-1]["message"] == "Message 19"

    def test_mark_one_read(self, make_user):
        user = make_user()
        _notify(user, 2)
        items = client.get("/api/notifications", headers=user["headers"]).json()["data"]["items"]
        response = client.post(f"/api/notifications/{items[0]['id']}/read", headers=user["headers"])
        assert response.status_code == 200
        assert response.json()["data"]["read"] is True
        data = client.get("/api/notifications", headers=user["headers"]).json()["data"]
        assert data["unreadCount"] == 1

    def test_mark_unknown_is_404(self, make_user):
        user = make_user()
        response = client.post("/api/notifications/65a1b2c3d4e5f6a7b8c9d0e1/read", headers=user["headers"])
        assert response.status_code == 404

    def test_mark_all_read(self, make_user):
        user = make_user()
        _notify(user, 3)
        response = client.post("/api/notifications/read-all", headers=user["headers"])
        assert response.json()["data"]["updated"] == 3
        data = client.get("/api/notifications", headers=user["headers"]).json()["data"]
        assert data["unreadCount"] == 0

    def test_mark_read_keeps_notification_arriving_meanwhile(self, make_user, monkeypatch):
        user = make_user()
        _notify(user)
        note_id = client.get("/api/notifications", headers=user["headers"]).json()["data"]["items"][0]["id"]
        _notify_on_next_lookup(user, monkeypatch)

        get_notification_service().mark_read(user["id"], note_id)

        data = client.get("/api/notifications", headers=user["headers"]).json()["data"]
        assert [n["message"] for n in data["items"]] == ["arrived meanwhile", "Message 0"]
        assert [n["read"] for n in data["items"]] == [False, True]

    def test_mark_all_read_keeps_notification_arriving_meanwhile(self, make_user, monkeypatch):
        user = make_user()
        _notify(user, 2)
        _notify_on_next_lookup(user, monkeypatch)

        assert get_notification_service().mark_all_read(user["id"]) == 2

        data = client.get("/api/notifications", headers=user["headers"]).json()["data"]
        assert [n["message"] for n in data["items"]] == ["arrived meanwhile", "Message 1", "Message 0"]

    def test_notifications_are_private(self, make_user):
        owner, other = make_user(), make_user()
        _notify(owner)
        data = client.get("/api/notifications", headers=other["headers"]).json()["data"]
        assert data["items"] == []

    def test_notify_emits_to_user_room(self, make_user, publisher):
        user = make_user()
        _notify(user)
        event, payload, rooms = publisher.events[-1]
        assert event == "notification"
        assert payload["message"] == "Message 0"
        assert rooms == [f"user:{user['id']}"]


def _namespace():
    ns = MainNamespace("/", lambda token: get_user_service().user_from_token(token))
    ns.save_session = AsyncMock()
    ns.get_session = AsyncMock()
    ns.enter_room = AsyncMock()
    ns.emit = AsyncMock()
    return ns


@pytest.mark.anyio
class TestSocketNamespace:
    async def test_connect_joins_user_room(self, make_user):
        user = make_user()
        ns = _namespace()
        await ns.on_connect("sid-1", {}, {"token": user["token"]})
        ns.enter_room.assert_awaited_once_with("sid-1", f"user:{user['id']}")
        ns.emit.assert_awaited_once()
        assert ns.emit.await_args.args[0] == "connection_response"

    async def test_connect_accepts_authorization_header(self, make_user):
        user = make_user()
        ns = _namespace()
        await ns.on_connect("sid-2", {"HTTP_AUTHORIZATION": f"Bearer {user['token']}"}, None)
        ns.enter_room.assert_awaited_once()

    async def test_connect_without_token_is_refused(self):
        ns = _namespace()
        with pytest.raises(ConnectionRefusedError):
            await ns.on_connect("sid-3", {}, None)

    async def test_connect_with_bad_token_is_refused(self):
        ns = _namespace()
        with pytest.raises(ConnectionRefusedError):
            await ns.on_connect("sid-4", {}, {"token": "garbage"})

    async def test_connect_with_non_dict_auth_is_refused(self, make_user):
        user = make_user()
        ns = _namespace()
        with pytest.raises(ConnectionRefusedError):
            await ns.on_connect("sid-7", {}, user["token"])
        ns.enter_room.assert_not_awaited()

    async def test_identify_mismatch_emits_error(self, make_user):
        user = make_user()
        ns = _namespace()
        ns.get_session.return_value = {"user_id": user["id"], "role": "user"}
        await ns.on_identify("sid-5", "someone-else")
        assert ns.emit.await_args.args[0] == "error"
        ns.enter_room.assert_not_awaited()

    async def test_identify_match(self, make_user):
        user = make_user()
        ns = _namespace()
        ns.get_session.return_value = {"user_id": user["id"], "role": "user"}
        await ns.on_identify("sid-6", user["id"])
        assert ns.emit.await_args.args[0] == "identified"


@pytest.mark.anyio
class TestSocketPublisher:
    async def test_publish_returns_before_emits_finish(self):
        release = anyio.Event()

        async def slow_emit(event, payload, room):
            await release.wait()

        server = MagicMock()
        server.emit = AsyncMock(side_effect=slow_emit)
        async with anyio.from_thread.BlockingPortal() as portal:
            publisher = SocketPublisher(server, portal)
            futures = await anyio.to_thread.run_sync(
                publisher.publish, "taskCreated", {"id": "t1"}, ["user:a", "user:b"])
            assert len(futures) == 2
            assert not any(f.done() for f in futures)
            release.set()
            await anyio.to_thread.run_sync(lambda: [f.result(timeout=5) for f in futures])
        assert server.emit.await_count == 2
        server.emit.assert_any_await("taskCreated", {"id": "t1"}, room="user:b")

    async def test_failed_emit_stays_on_its_future(self):
        server = MagicMock()
        server.emit = AsyncMock(side_effect=RuntimeError("socket down"))
        async with anyio.from_thread.BlockingPortal() as portal:
            publisher = SocketPublisher(server, portal)
            futures = await anyio.to_thread.run_sync(publisher.publish, "taskDeleted", {"id": "t1"}, ["user:a"])
            errors = await anyio.to_thread.run_sync(lambda: [f.exception(timeout=5) for f in futures])
        assert isinstance(errors[0], RuntimeError)


@pytest.fixture
def anyio_backend():
    return "asyncio"
