from collections.abc import AsyncIterator

import pytest_asyncio
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient

from httperrors import Kind, MissingField, build
from httperrors.main import create_app


def make_app() -> FastAPI:
    """App with a few endpoints that fail in the ways real handlers do."""
    app = create_app()

    @app.get("/users/{user_id}")
    async def get_user(user_id: int) -> dict[str, int]:
        if user_id == 1:
            return {"id": 1}
        raise build(404, Kind.NOT_FOUND, "user_missing", LookupError("no such user"))

    @app.post("/signup")
    async def signup(email: str = "") -> dict[str, str]:
        if not email:
            raise MissingField("email")
        return {"email": email}

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("connection to db:5432 failed with password hunter2")

    @app.get("/admin")
    async def admin() -> None:
        raise HTTPException(status_code=403, detail="internal acl table t_acl row 7")

    @app.get("/search")
    async def search(q: str) -> dict[str, str]:
        return {"q": q}

    return app


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """HTTP client talking to the test app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=make_app()),
        base_url="http://test",
    ) as client:
        yield client
