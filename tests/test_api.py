"""
tests.test_api

End-to-end HTTP behavior through the FastAPI app.

Responsibilities:
- Browser flow: login cookie, dashboard redirect, logout.
- API flow: Basic auth challenge, upload/list/delete, error bodies.
"""

from __future__ import annotations

import httpx
import pytest

ADMIN = ("admin", "admin-pass")
USER = ("user", "user-pass")


async def _login(client: httpx.AsyncClient, username: str, password: str) -> httpx.Response:
    return await client.post("/login", json={"username": username, "password": password})


@pytest.mark.asyncio
async def test_session_scenario(client: httpx.AsyncClient) -> None:
    r = await _login(client, *ADMIN)
    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "redirect": "/dashboard",
        "username": "admin",
        "role": "admin",
    }
    assert client.cookies.get("bytevault_session")

    r = await client.post("/upload", files={"file": ("report.txt", b"abc", "text/plain")})
    assert r.status_code == 200
    body = r.json()
    assert body["size"] == 3
    assert body["mimetype"] == "text/plain"
    assert body["filename"].endswith("-report.txt")
    name = body["filename"]

    r = await client.get("/files")
    assert r.status_code == 200
    assert [(f["name"], f["size"]) for f in r.json()] == [(name, 3)]

    r = await client.delete(f"/files/{name}")
    assert r.status_code == 200
    assert r.json() == {"message": "File deleted successfully"}

    r = await client.get("/files")
    assert r.json() == []

    r = await client.delete(f"/files/{name}")
    assert r.status_code == 404
    assert r.json() == {"error": "File not found"}


@pytest.mark.asyncio
async def test_basic_auth_api(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/upload", files={"file": ("a.txt", b"hello", "text/plain")}, auth=USER
    )
    assert r.status_code == 200

    r = await client.get("/files", auth=ADMIN)
    assert r.status_code == 200
    assert [f["size"] for f in r.json()] == [5]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "path"), [("GET", "/files"), ("DELETE", "/files/x"), ("POST", "/upload")]
)
async def test_api_without_credentials_is_challenged(
    client: httpx.AsyncClient, method: str, path: str
) -> None:
    r = await client.request(method, path)
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == 'Basic realm="ByteVault API"'
    assert r.json() == {"error": "Authentication required"}


@pytest.mark.asyncio
async def test_api_with_wrong_password(client: httpx.AsyncClient) -> None:
    r = await client.get("/files", auth=("admin", "nope"))
    assert r.status_code == 401
    assert r.headers["www-authenticate"].startswith("Basic")
    assert r.json() == {"error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_basic_auth_works_alongside_a_session(client: httpx.AsyncClient) -> None:
    await _login(client, *USER)
    r = await client.get("/files", auth=ADMIN)
    assert r.status_code == 200
    # A bad inline credential still falls back to the session.
    r = await client.get("/files", auth=("admin", "nope"))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_empty_and_missing_uploads(client: httpx.AsyncClient) -> None:
    r = await client.post("/upload", files={"file": ("empty.txt", b"", "text/plain")}, auth=ADMIN)
    assert r.status_code == 400
    assert r.json() == {"error": "No file uploaded"}

    r = await client.post("/upload", data={"note": "no file here"}, auth=ADMIN)
    assert r.status_code == 400

    r = await client.get("/files", auth=ADMIN)
    assert r.json() == []


@pytest.mark.asyncio
async def test_same_name_uploads_get_distinct_names(client: httpx.AsyncClient) -> None:
    names = set()
    for _ in range(3):
        files = {"file": ("dup.txt", b"x", "text/plain")}
        r = await client.post("/upload", files=files, auth=ADMIN)
        names.add(r.json()["filename"])
    assert len(names) == 3

    r = await client.get("/files", auth=ADMIN)
    assert {f["name"] for f in r.json()} == names


@pytest.mark.asyncio
async def test_dashboard_redirects_until_logged_in(client: httpx.AsyncClient) -> None:
    r = await client.get("/dashboard")
    assert r.status_code == 303
    assert r.headers["location"] == "/login"

    await _login(client, *USER)
    r = await client.get("/dashboard")
    assert r.status_code == 200
    assert r.json() == {"username": "user", "role": "user"}


@pytest.mark.asyncio
async def test_failed_login(client: httpx.AsyncClient) -> None:
    r = await _login(client, "admin", "user-pass")
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid credentials"}
    assert "www-authenticate" not in r.headers
    assert client.cookies.get("bytevault_session") is None


@pytest.mark.asyncio
async def test_logout_destroys_session(client: httpx.AsyncClient) -> None:
    await _login(client, *ADMIN)
    token = client.cookies.get("bytevault_session")

    r = await client.get("/logout")
    assert r.status_code == 303
    assert r.headers["location"] == "/login"

    # Replaying the old cookie does not help; the session is gone server-side.
    client.cookies.clear()
    replay = {"cookie": f"bytevault_session={token}"}
    r = await client.get("/files", headers=replay)
    assert r.status_code == 401
    r = await client.get("/dashboard", headers=replay)
    assert r.status_code == 303

    r = await client.get("/logout")
    assert r.status_code == 303


@pytest.mark.asyncio
async def test_relogin_replaces_previous_session(client: httpx.AsyncClient) -> None:
    await _login(client, *USER)
    first = client.cookies.get("bytevault_session")
    await _login(client, *ADMIN)
    second = client.cookies.get("bytevault_session")
    assert first != second

    client.cookies.clear()
    r = await client.get("/files", headers={"cookie": f"bytevault_session={first}"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_login_page_without_static_dir(client: httpx.AsyncClient) -> None:
    r = await client.get("/login")
    assert r.status_code == 200
    assert "detail" in r.json()


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Basic !!!notbase64", "Basic Zm9v"])
async def test_undecodable_basic_header_falls_back_to_session(
    client: httpx.AsyncClient, header: str
) -> None:
    await _login(client, *ADMIN)
    r = await client.get("/dashboard", headers={"authorization": header})
    assert r.status_code == 200
    r = await client.get("/files", headers={"authorization": header})
    assert r.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Basic !!!notbase64", "Basic Zm9v"])
async def test_undecodable_basic_header_without_session(
    client: httpx.AsyncClient, header: str
) -> None:
    r = await client.get("/files", headers={"authorization": header})
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == 'Basic realm="ByteVault API"'
    assert r.json() == {"error": "Invalid credentials"}

    r = await client.get("/dashboard", headers={"authorization": header})
    assert r.status_code == 303
    assert r.headers["location"] == "/login"
