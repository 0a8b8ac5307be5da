from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from carpool.utils.exceptions import TokenExpiredException, UnauthorizedException
from carpool.utils.security import SecurityService
from conftest import PREFIX, make_settings


def test_register_returns_token_with_identity_claims(client):
    response = client.post(f"{PREFIX}/auth/register", json={
        "fullName": "Dana Driver",
        "email": "dana@example.com",
        "phone": "123",
        "password": "secret123",
        "isDriver": True,
    })
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["role"] == "driver"
    assert data["user"]["rating"] == 0.0

    claims = jwt.decode(data["token"], "test-secret-key", algorithms=["HS256"])
    assert claims["sub"] == str(data["user"]["id"])
    assert claims["email"] == "dana@example.com"
    assert claims["role"] == "driver"
    issued_for = datetime.fromtimestamp(claims["exp"], tz=timezone.utc) - datetime.now(timezone.utc)
    assert timedelta(hours=23) < issued_for <= timedelta(hours=24)


def test_register_duplicate_email_conflicts(api, client):
    api.register("First", "same@example.com")
    response = client.post(f"{PREFIX}/auth/register", json={
        "fullName": "Second", "email": "same@example.com", "phone": "1", "password": "secret123",
    })
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"


def test_register_rejects_short_password(client):
    response = client.post(f"{PREFIX}/auth/register", json={
        "fullName": "Shorty", "email": "short@example.com", "phone": "1", "password": "123",
    })
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_login_success_and_wrong_password(api, client):
    api.register("Pat", "pat@example.com")

    ok = client.post(f"{PREFIX}/auth/login", json={"email": "pat@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["data"]["user"]["role"] == "passenger"

    bad = client.post(f"{PREFIX}/auth/login", json={"email": "pat@example.com", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.json()["error"]["code"] == "UNAUTHORIZED"


def test_protected_route_requires_bearer_token(client):
    assert client.get(f"{PREFIX}/bookings/my-bookings").status_code == 401

    response = client.get(f"{PREFIX}/bookings/my-bookings", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_me_returns_current_user(api, client, passenger):
    response = client.get(f"{PREFIX}/auth/me", headers=passenger["headers"])
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "pavel@example.com"


def test_expired_token_is_rejected():
    security = SecurityService(make_settings(ACCESS_TOKEN_EXPIRE_MINUTES=-5))
    token = security.create_access_token(1, "x@example.com", "passenger")
    with pytest.raises(TokenExpiredException):
        security.verify_access_token(token)


def test_token_signed_with_other_secret_is_rejected():
    token = SecurityService(make_settings(SECRET_KEY="another")).create_access_token(1, "x@example.com", "driver")
    with pytest.raises(UnauthorizedException):
        SecurityService(make_settings()).verify_access_token(token)


def test_password_hash_roundtrip():
    security = SecurityService(make_settings())
    hashed = security.hash_password("secret123")
    assert hashed != "secret123"
    assert security.verify_password("secret123", hashed)
    assert not security.verify_password("secret124", hashed)


def test_profile_update_and_public_profile(api, client, driver, passenger):
    response = client.put(f"{PREFIX}/users/profile", headers=driver["headers"], json={
        "carBrand": "Lada", "carModel": "Vesta", "carColor": "white", "carYear": 2020,
    })
    assert response.status_code == 200
    assert response.json()["data"]["carModel"] == "Vesta"

    public = client.get(f"{PREFIX}/users/{driver['id']}", headers=passenger["headers"]).json()["data"]
    assert public["car"] == "Lada Vesta"
    assert "phone" not in public and "email" not in public
