from datetime import datetime, timedelta, timezone

from app.users import service as user_service


def _days(n: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=n)


async def test_create_user_is_idempotent_by_email(client):
    payload = {"email": "new@example.com", "name": "New", "photo": "https://img/p.png"}
    first = await client.post("/users", json=payload)
    assert first.status_code == 200
    assert first.json()["insertedId"] is not None

    second = await client.post("/users", json=payload)
    assert second.status_code == 200
    assert second.json() == {"message": "user already exists", "insertedId": None}


async def test_role_lookup_defaults_to_user(client, make_user):
    await make_user("boss@example.com", role="admin")
    assert (await client.get("/users/boss@example.com/role")).json() == {"role": "admin"}
    assert (await client.get("/users/nobody@example.com/role")).json() == {"role": "user"}


async def test_list_users_admin_only(client, make_user, auth_headers, admin_headers):
    for i in range(3):
        await make_user(f"u{i}@example.com")
    res = await client.get("/users", params={"page": 0, "limit": 2}, headers=admin_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 4
    assert len(body["users"]) == 2

    res = await client.get("/users", headers=await auth_headers("u0@example.com"))
    assert res.status_code == 403


async def test_lookup_user_by_email(client, make_user, auth_headers):
    await make_user("reader@example.com", name="Reader")
    headers = await auth_headers("reader@example.com")
    res = await client.get("/user", params={"email": "reader@example.com"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["name"] == "Reader"
    assert res.json()["role"] == "user"

    res = await client.get("/user", params={"email": "missing@example.com"}, headers=headers)
    assert res.status_code == 404


async def test_update_own_profile(client, make_user, auth_headers):
    await make_user("reader@example.com", name="Old")
    res = await client.patch(
        "/users", json={"name": "New Name", "photo": "https://img/new.png"}, headers=await auth_headers("reader@example.com")
    )
    assert res.status_code == 200
    assert res.json()["name"] == "New Name"
    assert res.json()["photo"] == "https://img/new.png"


async def test_set_and_clear_premium(client, make_user, auth_headers):
    await make_user("reader@example.com")
    headers = await auth_headers("reader@example.com")
    until = _days(5).replace(microsecond=0)
    await client.post("/payments", json={"transactionId": "pi_1", "amount": 999}, headers=headers)

    res = await client.patch("/users/reader@example.com", json={"premiumInfo": until.isoformat()}, headers=headers)
    assert res.status_code == 200
    assert datetime.fromisoformat(res.json()["premiumInfo"]) == until

    res = await client.patch("/users/reader@example.com", json={"premiumInfo": None}, headers=headers)
    assert res.status_code == 200
    assert res.json()["premiumInfo"] is None


async def test_premium_without_payment_keeps_one_article_limit(client, make_user, auth_headers):
    await make_user("w@example.com")
    headers = await auth_headers("w@example.com")
    await client.post("/articles", json={"title": "first", "description": "d"}, headers=headers)

    res = await client.patch("/users/w@example.com", json={"premiumInfo": "2099-01-01T00:00:00Z"}, headers=headers)
    assert res.status_code == 403
    assert res.json() == {"message": "premium requires a recorded payment"}

    res = await client.post("/articles", json={"title": "second", "description": "d"}, headers=headers)
    assert res.status_code == 403


async def test_premium_window_is_capped_by_payment(client, make_user, auth_headers):
    await make_user("w@example.com")
    headers = await auth_headers("w@example.com")
    await client.post("/payments", json={"transactionId": "pi_2", "amount": 999}, headers=headers)

    res = await client.patch("/users/w@example.com", json={"premiumInfo": "2099-01-01T00:00:00Z"}, headers=headers)
    assert res.status_code == 400

    res = await client.patch("/users/w@example.com", json={"premiumInfo": _days(10).isoformat()}, headers=headers)
    assert res.status_code == 200

    res = await client.post("/articles", json={"title": "first", "description": "d"}, headers=headers)
    assert res.status_code == 200
    res = await client.post("/articles", json={"title": "second", "description": "d"}, headers=headers)
    assert res.status_code == 200


async def test_premium_update_for_someone_else_requires_admin(client, make_user, auth_headers, admin_headers):
    await make_user("a@example.com")
    await make_user("b@example.com")
    body = {"premiumInfo": _days(1).isoformat()}

    res = await client.patch("/users/b@example.com", json=body, headers=await auth_headers("a@example.com"))
    assert res.status_code == 403

    res = await client.patch("/users/b@example.com", json=body, headers=admin_headers)
    assert res.status_code == 200


async def test_make_admin(client, make_user, admin_headers):
    user = await make_user("promote@example.com")
    res = await client.patch(f"/users/admin/{user.id}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["role"] == "admin"

    assert (await client.patch("/users/admin/999", headers=admin_headers)).status_code == 404
    assert (await client.patch("/users/admin/xyz", headers=admin_headers)).status_code == 400


async def test_user_stats_and_lazy_expiry(client, make_user, auth_headers):
    await make_user("normal@example.com")
    await make_user("lapsed@example.com", premium_info=_days(-1))
    await make_user("vip@example.com", premium_info=_days(1))

    stats = (await client.get("/user-stats")).json()
    assert stats == {"totalUsers": 3, "normalUsers": 1, "premiumUsers": 1}

    # 만료된 사용자의 다음 인증 요청에서 premium_info 가 정리됩니다.
    await client.get("/articles/premium", headers=await auth_headers("lapsed@example.com"))

    stats = (await client.get("/user-stats")).json()
    assert stats == {"totalUsers": 3, "normalUsers": 2, "premiumUsers": 1}


async def test_clear_expired_premium_leaves_active_premium(make_user, db):
    await make_user("vip@example.com", premium_info=_days(2))
    assert await user_service.clear_expired_premium(db, "vip@example.com") is False
    user = await user_service.get_user_by_email("vip@example.com", db)
    assert user.premium_info is not None
