"""End-to-end tests: real app lifespan, real UserService, in-memory SQLite."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from userapi.api import create_app
from userapi.dao.user_dao import UserDAO

DB_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def client():
    app = create_app(database_url=DB_URL)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    assert app.state.engine is None


async def _register(client, username="testUser", password="testPass"):
    return await client.post("/users", json={"username": username, "password": password})


class TestUserFlow:
    async def test_create_then_fetch(self, client):
        created = await _register(client)
        assert created.status_code == 201
        user = created.json()["data"]["user"]
        assert user["username"] == "testUser"
        assert user["password"] != "testPass"

        fetched = await client.get(f"/users/{user['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["status"] == "OK"
        assert fetched.json()["data"]["user"] == user

    async def test_login_paths(self, client):
        await _register(client)

        ok = await client.post("/users/login", json={"username": "testUser", "password": "testPass"})
        assert ok.status_code == 200
        assert ok.json()["message"] == "Login successful"

        bad = await client.post("/users/login", json={"username": "testUser", "password": "wrongPass"})
        assert bad.status_code == 401
        assert bad.json()["message"] == "Invalid username or password"

        ghost = await client.post("/users/login", json={"username": "ghost", "password": "testPass"})
        assert ghost.status_code == 404
        assert ghost.json()["message"] == "User not found"

    async def test_duplicate_username(self, client):
        assert (await _register(client)).status_code == 201
        dup = await _register(client, password="other")
        assert dup.status_code == 409
        assert dup.json()["status"] == "CONFLICT"

    async def test_rejected_create_stores_nothing(self, client):
        resp = await _register(client, username="  ")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid credentials"

        login = await client.post("/users/login", json={"username": "  ", "password": "testPass"})
        assert login.status_code == 400
        assert login.json()["message"] == "Invalid username or password"

    async def test_unknown_id(self, client):
        resp = await client.get("/users/9999")
        assert resp.status_code == 404
        assert resp.json() == {"message": "User not found", "status": "NOT_FOUND", "data": {}}

    async def test_long_password_round_trip(self, client):
        password = "p" * 100
        assert (await _register(client, password=password)).status_code == 201

        ok = await client.post("/users/login", json={"username": "testUser", "password": password})
        assert ok.status_code == 200

        # same first 72 bytes, different tail
        near = await client.post(
            "/users/login", json={"username": "testUser", "password": "p" * 72 + "q" * 28}
        )
        assert near.status_code == 401

    async def test_concurrent_duplicate_is_conflict(self, client):
        """The pre-insert check can miss a row created in between; the unique constraint decides."""
        assert (await _register(client)).status_code == 201

        with patch.object(UserDAO, "username_taken", AsyncMock(return_value=False)):
            dup = await _register(client, password="other")

        assert dup.status_code == 409
        assert dup.json() == {
            "message": "Username already exists",
            "status": "CONFLICT",
            "data": {},
        }
