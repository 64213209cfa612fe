import pytest
import httpx

from trendhaven.core.config import settings


async def _signup(client, email="ana@example.com", password="hunter22"):
    return await client.post("/api/auth/signup", json={"email": email, "password": password})


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_health(client: httpx.AsyncClient):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_signup_signin_and_me(client: httpx.AsyncClient):
    resp = await _signup(client, email="Ana@Example.com")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["token"]
    assert body["message"] == "Account created successfully"
    assert body["user"]["email"] == "ana@example.com"
    assert body["user"]["is_anonymous"] is False

    signin = await client.post("/api/auth/signin", json={"email": "ana@example.com", "password": "hunter22"})
    assert signin.status_code == 200
    assert signin.json()["user"]["id"] == body["user"]["id"]

    me = await client.get("/api/auth/me", headers=_bearer(signin.json()["token"]))
    assert me.status_code == 200
    assert me.json()["user"]["id"] == body["user"]["id"]


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client: httpx.AsyncClient):
    assert (await _signup(client)).status_code == 200
    again = await _signup(client, email="ANA@example.com")
    assert again.status_code == 400
    assert again.json()["detail"] == "email_exists"


@pytest.mark.asyncio
async def test_weak_password_rejected(client: httpx.AsyncClient):
    resp = await _signup(client, password="abc")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "weak_password"


@pytest.mark.asyncio
async def test_missing_fields_are_400(client: httpx.AsyncClient):
    resp = await client.post("/api/auth/signup", json={"email": "ana@example.com"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "invalid_request"
    resp = await client.post("/api/auth/signin", json={})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_wrong_password_is_401(client: httpx.AsyncClient):
    await _signup(client)
    resp = await client.post("/api/auth/signin", json={"email": "ana@example.com", "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "invalid_credentials"
    unknown = await client.post("/api/auth/signin", json={"email": "bob@example.com", "password": "hunter22"})
    assert unknown.status_code == 401


@pytest.mark.asyncio
async def test_anonymous_sign_in(client: httpx.AsyncClient):
    resp = await client.post("/api/auth/signin-anonymous")
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["is_anonymous"] is True
    assert user["email"] is None
    me = await client.get("/api/auth/me", headers=_bearer(resp.json()["token"]))
    assert me.json()["user"]["id"] == user["id"]


@pytest.mark.asyncio
async def test_signout_revokes_token(client: httpx.AsyncClient, fake_redis):
    token = (await _signup(client)).json()["token"]
    assert (await client.get("/api/outfits", headers=_bearer(token))).status_code == 200

    out = await client.post("/api/auth/signout", headers=_bearer(token))
    assert out.status_code == 200
    assert out.json()["message"] == "Signed out successfully"
    assert any(k.startswith("auth:revoked:") for k in fake_redis.data)

    assert (await client.get("/api/auth/me", headers=_bearer(token))).status_code == 401
    assert (await client.get("/api/outfits", headers=_bearer(token))).status_code == 401


@pytest.mark.asyncio
async def test_signout_without_token_is_ok(client: httpx.AsyncClient):
    resp = await client.post("/api/auth/signout")
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_missing_or_bad_token_is_401(client: httpx.AsyncClient):
    assert (await client.get("/api/auth/me")).status_code == 401
    assert (await client.get("/api/outfits")).status_code == 401
    bad = await client.get("/api/outfits", headers=_bearer("not.a.jwt"))
    assert bad.status_code == 401
    assert bad.json()["detail"] == "invalid_token"


@pytest.mark.asyncio
async def test_unconfigured_identity_reports_setup_required(client: httpx.AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET", "change-me")
    for resp in [
        await _signup(client),
        await client.post("/api/auth/signin-anonymous"),
        await client.get("/api/outfits", headers=_bearer("anything")),
    ]:
        assert resp.status_code == 503
        assert resp.json()["setup_required"] is True
