from angra.core.roles import Role


def test_login_returns_tokens_and_resolved_session(client, make_user):
    make_user("op1", Role.OPERATOR, email="op1@example.com")
    res = client.post("/auth/login", data={"email": "op1@example.com", "password": "secret123"})
    assert res.status_code == 200
    body = res.json()
    assert body["id_token"] == "token-op1"
    assert body["user_id"] == "op1"
    assert body["session"]["state"] == "authenticated"
    assert body["session"]["role"] == "operator"
    assert body["session"]["is_admin_or_operator"] is True
    assert body["session"]["is_admin"] is False


def test_login_wrong_password(client, make_user):
    make_user("op1", Role.OPERATOR, email="op1@example.com")
    res = client.post("/auth/login", data={"email": "op1@example.com", "password": "nope"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid e-mail or password"


def test_login_rejects_malformed_email(client, identity):
    res = client.post("/auth/login", data={"email": "not-an-email", "password": "x"})
    assert res.status_code == 422


def test_register_creates_client_profile(client, db):
    res = client.post(
        "/auth/register",
        data={"name": "Maria Silva", "email": "maria@example.com", "password": "secret123"},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["session"]["role"] == "client"
    row = db.rows("profiles")[body["user_id"]]
    assert row["role"] == "client"
    assert row["display_name"] == "Maria Silva"


def test_register_short_password(client, db):
    res = client.post("/auth/register", data={"name": "M", "email": "m@example.com", "password": "123"})
    assert res.status_code == 422
    assert db.writes == 0


def test_register_duplicate_email(client, make_user):
    make_user("c1", email="taken@example.com")
    res = client.post("/auth/register", data={"name": "X", "email": "taken@example.com", "password": "secret123"})
    assert res.status_code == 400
    assert res.json()["detail"] == "This e-mail is already registered"


def test_reset_password_same_response_for_known_and_unknown(client, make_user, identity):
    make_user("c1", email="known@example.com")
    known = client.post("/auth/reset-password", params={"email": "known@example.com"})
    unknown = client.post("/auth/reset-password", params={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert identity.reset_requests == ["known@example.com", "ghost@example.com"]


def test_update_password_requires_session_or_code(client):
    res = client.post("/auth/update-password", data={"new_password": "newsecret"})
    assert res.status_code == 401


def test_update_password_with_recovery_code(client):
    res = client.post("/auth/update-password", data={"new_password": "newsecret", "oob_code": "good-code"})
    assert res.status_code == 200
    assert res.json()["message"] == "Password updated"


def test_update_password_with_bad_recovery_code(client):
    res = client.post("/auth/update-password", data={"new_password": "newsecret", "oob_code": "used"})
    assert res.status_code == 400


def test_update_password_signed_in(client, client_headers, identity):
    res = client.post("/auth/update-password", data={"new_password": "newsecret"}, headers=client_headers)
    assert res.status_code == 200
    assert identity.password_updates[-1]["id_token"] == "token-client1"


def test_session_anonymous_without_token(client):
    res = client.get("/auth/session")
    assert res.status_code == 200
    assert res.json()["state"] == "anonymous"
    assert res.json()["is_authenticated"] is False


def test_session_with_token(client, admin_headers):
    body = client.get("/auth/session", headers=admin_headers).json()
    assert body["role"] == "admin"
    assert body["principal"]["uid"] == "admin1"


def test_logout_is_idempotent(client, client_headers, identity):
    first = client.post("/auth/logout", headers=client_headers)
    second = client.post("/auth/logout")
    assert first.status_code == second.status_code == 200
    assert first.json()["session"]["state"] == "anonymous"
    assert second.json()["session"]["state"] == "anonymous"
    assert identity.revoked == ["client1"]


def test_update_own_display_name(client, client_headers, db):
    res = client.patch("/auth/me", data={"display_name": "  New Name "}, headers=client_headers)
    assert res.status_code == 200
    assert res.json()["display_name"] == "New Name"
    assert db.rows("profiles")["client1"]["display_name"] == "New Name"


def test_update_own_display_name_requires_session(client):
    assert client.patch("/auth/me", data={"display_name": "X"}).status_code == 401
