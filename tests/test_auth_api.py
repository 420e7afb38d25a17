"""
API tests for the login page, login and logout.
"""
import pytest

from hrs.core.session import SESSION_COOKIES, decode_session_token
from hrs.models.setting import Setting

DEFAULT_PASSWORD = "P@s5w0rd"


@pytest.mark.asyncio
async def test_home_defaults_company_name(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"company_name": "HRS"}


@pytest.mark.asyncio
async def test_home_reads_company_name_setting(client, db_session):
    db_session.add(Setting(key="company_name", value="Acme People"))
    await db_session.commit()
    response = await client.get("/")
    assert response.json() == {"company_name": "Acme People"}


@pytest.mark.asyncio
async def test_login_with_email_sets_cookies_and_redirects(client, super_admin):
    response = await client.post("/login", data={
        "email": super_admin.email,
        "password": DEFAULT_PASSWORD,
    })
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"

    cookies = response.cookies
    for name in SESSION_COOKIES:
        assert name in cookies
    assert cookies["userId"] == str(super_admin.id)
    assert decode_session_token(cookies["sessionId"]) == super_admin.id
    assert all(
        "Max-Age=2592000" in header
        for header in response.headers.get_list("set-cookie")
    )


@pytest.mark.asyncio
async def test_login_with_username_then_use_session(client, super_admin):
    response = await client.post("/login", data={
        "username": super_admin.username,
        "password": DEFAULT_PASSWORD,
    })
    assert response.status_code == 303

    client.cookies.clear()
    for name in ("sessionId", "userId"):
        client.cookies.set(name, response.cookies[name])
    assert (await client.get("/api/roles")).status_code == 200


@pytest.mark.asyncio
async def test_login_wrong_password(client, super_admin):
    response = await client.post("/login", data={
        "email": super_admin.email,
        "password": "wrong-password",
    })
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"
    assert "set-cookie" not in response.headers


@pytest.mark.asyncio
async def test_login_unknown_user(client, super_admin):
    response = await client.post("/login", data={"email": "nobody@example.com", "password": "x"})
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("form", [
    {},
    {"email": "someone@example.com"},
    {"password": "secret"},
    {"email": "   ", "password": "secret"},
])
async def test_login_missing_fields(client, form):
    response = await client.post("/login", data=form)
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_logout_clears_cookies(client, login, super_admin):
    login(client, super_admin)
    response = await client.post("/logout")
    assert response.status_code == 302
    assert response.headers["location"] == "/"

    headers = response.headers.get_list("set-cookie")
    assert sorted(h.split("=", 1)[0] for h in headers) == sorted(SESSION_COOKIES)
    assert all("Max-Age=0" in h for h in headers)


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")
    assert response.json() == {"status": "ok"}
    assert "x-request-id" in response.headers


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found", "error": "Not Found"}


@pytest.mark.asyncio
async def test_wrong_method_uses_error_envelope(client):
    response = await client.delete("/api/health")
    assert response.status_code == 405
    assert response.json()["success"] is False
    assert "GET" in response.headers["allow"]
