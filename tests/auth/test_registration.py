"""
Tests for account registration and email verification.
"""
from clinic_api.auth import store
from clinic_api.auth.models import User


def register(client, email="a@x.com", password="longenough1", name="A"):
    return client.post("/api/auth/register", json={"email": email, "password": password, "name": name})


def test_register_creates_unverified_account(client, db, mailer):
    response = register(client)
    assert response.status_code == 201
    body = response.json()
    assert "msg" in body
    assert "token" not in body
    assert "password_hash" not in body

    user = db.query(User).filter(User.email == "a@x.com").first()
    assert user is not None
    assert user.verified is False
    assert user.admin is False
    assert user.token
    assert user.password_hash != "longenough1"


def test_register_sends_verification_link(client, db, mailer):
    register(client)
    user = db.query(User).filter(User.email == "a@x.com").first()

    assert len(mailer.sent) == 1
    email = mailer.sent[0]
    assert email["to"] == "a@x.com"
    assert f"http://frontend.test/auth/confirm-account/{user.token}" in email["body"]


def test_register_with_missing_field_fails(client, mailer):
    response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "longenough1"})
    assert response.status_code == 400
    assert response.json()["msg"] == "All fields are required"
    assert mailer.sent == []


def test_register_with_blank_name_fails(client):
    response = register(client, name="   ")
    assert response.status_code == 400


def test_register_with_malformed_email_fails(client):
    response = register(client, email="not-an-email")
    assert response.status_code == 400


def test_register_duplicate_email_fails_without_new_token(client, db, mailer):
    register(client)
    original_token = db.query(User).filter(User.email == "a@x.com").first().token

    response = register(client, password="anotherpassword", name="B")
    assert response.status_code == 400
    assert response.json()["msg"] == "User already registered"

    assert db.query(User).filter(User.email == "a@x.com").count() == 1
    assert db.query(User).filter(User.email == "a@x.com").first().token == original_token
    assert len(mailer.sent) == 1


def test_register_weak_password_fails(client, db):
    response = register(client, password="  short  ")
    assert response.status_code == 400
    assert "8" in response.json()["msg"]
    assert db.query(User).count() == 0


def test_register_succeeds_when_email_delivery_fails(client, db, mailer):
    mailer.fail = True
    response = register(client)
    assert response.status_code == 201
    assert db.query(User).filter(User.email == "a@x.com").first() is not None


def test_verify_account(client, db):
    register(client)
    token = db.query(User).filter(User.email == "a@x.com").first().token

    response = client.get(f"/api/auth/verify/{token}")
    assert response.status_code == 200

    db.expire_all()
    user = db.query(User).filter(User.email == "a@x.com").first()
    assert user.verified is True
    assert user.token is None


def test_verify_twice_fails(client, db):
    register(client)
    token = db.query(User).filter(User.email == "a@x.com").first().token

    assert client.get(f"/api/auth/verify/{token}").status_code == 200
    response = client.get(f"/api/auth/verify/{token}")
    assert response.status_code == 401


def test_verify_unknown_token_fails(client):
    response = client.get("/api/auth/verify/deadbeef")
    assert response.status_code == 401
    assert "msg" in response.json()


def test_resend_verification_replaces_token(client, db, mailer):
    register(client)
    old_token = db.query(User).filter(User.email == "a@x.com").first().token

    response = client.post("/api/auth/resend-verification", json={"email": "a@x.com"})
    assert response.status_code == 200

    db.expire_all()
    new_token = db.query(User).filter(User.email == "a@x.com").first().token
    assert new_token != old_token
    assert len(mailer.sent) == 2
    assert client.get(f"/api/auth/verify/{old_token}").status_code == 401
    assert client.get(f"/api/auth/verify/{new_token}").status_code == 200


def test_resend_verification_for_verified_account_fails(client, verified_user):
    response = client.post("/api/auth/resend-verification", json={"email": verified_user.email})
    assert response.status_code == 400


def test_resend_verification_for_unknown_email_fails(client):
    response = client.post("/api/auth/resend-verification", json={"email": "nobody@x.com"})
    assert response.status_code == 404


def test_register_concurrent_duplicate_is_reported_as_duplicate(client, db, mailer, monkeypatch):
    register(client)
    mailer.sent.clear()

    # The lookup misses the existing row, the unique constraint has to catch it
    monkeypatch.setattr(store, "get_user_by_email", lambda db, email: None)
    response = register(client, password="anotherpassword", name="B")

    assert response.status_code == 400
    assert response.json()["msg"] == "User already registered"
    assert mailer.sent == []
    assert db.query(User).count() == 1


def test_verification_email_escapes_name(client, mailer):
    response = register(client, name='<a href="https://evil.example">Click here to confirm</a>')
    assert response.status_code == 201

    body = mailer.sent[0]["body"]
    assert '<a href="https://evil.example">' not in body
    assert "&lt;a href=&quot;https://evil.example&quot;&gt;" in body


def test_register_keeps_local_part_case(client, db):
    register(client, email="Mixed.Case@Clinic.COM")

    user = db.query(User).one()
    # The domain is normalized to lower case, the local part is kept as sent
    assert user.email == "Mixed.Case@clinic.com"

    user.verified = True
    db.commit()
    login = client.post("/api/auth/login", json={"email": "Mixed.Case@CLINIC.com", "password": "longenough1"})
    assert login.status_code == 200
    other = client.post("/api/auth/login", json={"email": "mixed.case@clinic.com", "password": "longenough1"})
    assert other.status_code == 401
