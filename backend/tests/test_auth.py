from datetime import datetime, timedelta, timezone

from jose import jwt

from app.auth.service import (
    InvalidCredentialsError,
    JWTIdentityVerifier,
    ProviderIdentityVerifier,
    create_access_token,
)
from app.config import settings


def _id_token(email: str, *, key: str | None = None, audience: str = "newspaper-test", **claims) -> str:
    """외부 ID 공급자가 발급했다고 가정한 ID 토큰."""
    payload = {
        "sub": "provider-uid-1",
        "email": email,
        "aud": audience,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        **claims,
    }
    return jwt.encode(payload, key or settings.IDENTITY_PROVIDER_KEY, algorithm="HS256")


async def test_exchange_id_token_for_access_token(client):
    res = await client.post("/jwt", json={"idToken": _id_token("reader@example.com")})
    assert res.status_code == 200
    token = res.json()["token"]

    principal = await JWTIdentityVerifier(settings.JWT_SECRET_KEY).verify(token)
    assert principal.email == "reader@example.com"
    assert principal.claims["type"] == "access"


async def test_email_alone_does_not_get_a_token(client):
    res = await client.post("/jwt", json={"email": "admin@example.com"})
    assert res.status_code == 400
    assert res.json()["message"] == "invalid request"


async def test_forged_id_token_cannot_reach_admin_routes(client, make_user, make_article):
    await make_user("admin@example.com", role="admin")
    article = await make_article()

    forged = _id_token("admin@example.com", key="attacker-key")
    res = await client.post("/jwt", json={"idToken": forged})
    assert res.status_code == 403
    assert res.json() == {"message": "forbidden access"}

    res = await client.delete(f"/articles/{article.id}", headers={"Authorization": f"Bearer {forged}"})
    assert res.status_code == 403


async def test_id_token_for_other_audience_is_rejected(client):
    res = await client.post("/jwt", json={"idToken": _id_token("reader@example.com", audience="another-app")})
    assert res.status_code == 403


async def test_unverified_email_is_rejected(client):
    res = await client.post("/jwt", json={"idToken": _id_token("reader@example.com", email_verified=False)})
    assert res.status_code == 403


async def test_access_token_is_not_an_id_token(client):
    # 우리 Access Token 은 공급자 키로 서명되지 않았으므로 교환할 수 없습니다.
    access = await create_access_token("reader@example.com")
    res = await client.post("/jwt", json={"idToken": access})
    assert res.status_code == 403


async def test_provider_verifier_without_key_rejects():
    verifier = ProviderIdentityVerifier(None)
    try:
        await verifier.verify(_id_token("reader@example.com"))
    except InvalidCredentialsError:
        pass
    else:
        raise AssertionError("verifier without a configured key must reject every token")


async def test_verifier_rejects_foreign_signature():
    token = jwt.encode(
        {"sub": "x@example.com", "type": "access", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "someone-else",
        algorithm="HS256",
    )
    verifier = JWTIdentityVerifier(settings.JWT_SECRET_KEY)
    try:
        await verifier.verify(token)
    except InvalidCredentialsError:
        pass
    else:
        raise AssertionError("token signed with another key must be rejected")


async def test_missing_header_is_401(client):
    res = await client.get("/articles/premium")
    assert res.status_code == 401
    assert res.json() == {"message": "unauthorized access"}


async def test_malformed_header_is_401(client):
    res = await client.get("/articles/premium", headers={"Authorization": "Token abc"})
    assert res.status_code == 401


async def test_invalid_token_is_403(client):
    res = await client.get("/articles/premium", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 403
    assert res.json() == {"message": "forbidden access"}


async def test_expired_token_is_403(client):
    token = await create_access_token("reader@example.com", expires_minutes=-1)
    res = await client.get("/articles/premium", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 403
