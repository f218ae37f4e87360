"""
Tests for the forgot-password flow.
"""
from datetime import datetime, timedelta, timezone

from clinic_api.auth import store
from clinic_api.auth.models import PasswordResetToken
from clinic_api.core.security import verify_password
from clinic_api.auth.service import purge_stale_reset_tokens


def utc_now():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def request_reset(client, email="patient@clinic.com"):
    return client.post("/api/auth/forgot-password", json={"email": email})


def latest_token(db, user_id):
    return (
        db.query(PasswordResetToken)
        .filter(PasswordResetToken.user_id == user_id)
        .order_by(PasswordResetToken.id.desc())
        .first()
    )


def test_forgot_password_sends_reset_link(client, db, mailer, verified_user):
    response = request_reset(client)
    assert response.status_code == 200

    reset_token = latest_token(db, verified_user.id)
    assert reset_token is not None
    assert reset_token.consumed is False
    assert reset_token.expires_at > utc_now()

    assert len(mailer.sent) == 1
    assert f"http://frontend.test/auth/forgot-password/{reset_token.token}" in mailer.sent[0]["body"]


def test_forgot_password_unknown_email(client, mailer):
    response = request_reset(client, email="nobody@x.com")
    assert response.status_code == 404
    assert mailer.sent == []


def test_forgot_password_missing_email(client):
    response = client.post("/api/auth/forgot-password", json={})
    assert response.status_code == 400


def test_forgot_password_fails_when_email_cannot_be_sent(client, mailer, verified_user):
    mailer.fail = True
    response = request_reset(client)
    assert response.status_code == 500
    assert "msg" in response.json()


def test_new_request_replaces_outstanding_token(client, db, verified_user):
    request_reset(client)
    first = latest_token(db, verified_user.id).token
    request_reset(client)
    second = latest_token(db, verified_user.id).token

    assert first != second
    assert client.get(f"/api/auth/forgot-password/{first}").status_code == 400
    assert client.get(f"/api/auth/forgot-password/{second}").status_code == 200


def test_validate_reset_token_does_not_consume_it(client, db, verified_user):
    request_reset(client)
    token = latest_token(db, verified_user.id).token

    assert client.get(f"/api/auth/forgot-password/{token}").status_code == 200
    assert client.get(f"/api/auth/forgot-password/{token}").status_code == 200


def test_validate_unknown_reset_token(client):
    response = client.get("/api/auth/forgot-password/deadbeef")
    assert response.status_code == 400


def test_validate_expired_reset_token(client, db, verified_user):
    request_reset(client)
    reset_token = latest_token(db, verified_user.id)
    reset_token.expires_at = utc_now() - timedelta(minutes=1)
    db.commit()

    response = client.get(f"/api/auth/forgot-password/{reset_token.token}")
    assert response.status_code == 400


def test_complete_reset_changes_password(client, db, verified_user):
    request_reset(client)
    token = latest_token(db, verified_user.id).token

    response = client.post(f"/api/auth/forgot-password/{token}", json={"password": "brandnewpass"})
    assert response.status_code == 200

    old_login = client.post("/api/auth/login", json={"email": "patient@clinic.com", "password": "longenough1"})
    assert old_login.status_code == 401
    new_login = client.post("/api/auth/login", json={"email": "patient@clinic.com", "password": "brandnewpass"})
    assert new_login.status_code == 200


def test_reset_token_cannot_be_redeemed_twice(client, db, verified_user):
    request_reset(client)
    token = latest_token(db, verified_user.id).token

    first = client.post(f"/api/auth/forgot-password/{token}", json={"password": "brandnewpass"})
    assert first.status_code == 200
    second = client.post(f"/api/auth/forgot-password/{token}", json={"password": "anotherpass1"})
    assert second.status_code == 400

    login = client.post("/api/auth/login", json={"email": "patient@clinic.com", "password": "brandnewpass"})
    assert login.status_code == 200


def test_complete_reset_with_expired_token(client, db, verified_user):
    request_reset(client)
    reset_token = latest_token(db, verified_user.id)
    reset_token.expires_at = utc_now() - timedelta(minutes=1)
    db.commit()

    response = client.post(f"/api/auth/forgot-password/{reset_token.token}", json={"password": "brandnewpass"})
    assert response.status_code == 400
    assert response.json()["msg"] == "Token has expired"


def test_complete_reset_with_short_password(client, db, verified_user):
    request_reset(client)
    token = latest_token(db, verified_user.id).token

    response = client.post(f"/api/auth/forgot-password/{token}", json={"password": "short"})
    assert response.status_code == 400
    # The token is still usable after a rejected password
    assert client.get(f"/api/auth/forgot-password/{token}").status_code == 200


def test_purge_removes_consumed_and_expired_tokens(client, db, verified_user):
    request_reset(client)
    request_reset(client)
    outstanding = latest_token(db, verified_user.id)

    assert purge_stale_reset_tokens(db) == 1
    remaining = db.query(PasswordResetToken).all()
    assert [token.id for token in remaining] == [outstanding.id]


def test_reset_token_is_consumed_only_once(db, verified_user):
    reset_token = store.create_reset_token(
        db,
        user_id=verified_user.id,
        token="f" * 32,
        expires_at=utc_now() + timedelta(minutes=30)
    )

    assert store.consume_reset_token(db, reset_token.id) is True
    assert store.consume_reset_token(db, reset_token.id) is False
    db.rollback()


def test_reset_losing_the_token_race_keeps_password(client, db, verified_user, monkeypatch):
    request_reset(client)
    token = latest_token(db, verified_user.id).token
    original_hash = verified_user.password_hash

    # Another request consumed the token between the lookup and the update
    monkeypatch.setattr(store, "consume_reset_token", lambda db, token_id: False)
    response = client.post(f"/api/auth/forgot-password/{token}", json={"password": "brandnewpass"})

    assert response.status_code == 400
    assert response.json()["msg"] == "Invalid token"
    db.refresh(verified_user)
    assert verified_user.password_hash == original_hash
    assert verify_password("longenough1", verified_user.password_hash)


def test_complete_reset_with_unknown_token_and_short_password(client):
    response = client.post("/api/auth/forgot-password/" + "0" * 32, json={"password": "short"})
    assert response.status_code == 400
    assert response.json()["msg"] == "Invalid token"
