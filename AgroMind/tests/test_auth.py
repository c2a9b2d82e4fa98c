from jose import jwt

from config.settings import settings
from utils.security import token_user_id


def test_register_normalizes_email_and_returns_201(client):
    r = client.post(
        "/auth/register",
        json={"email": "  Ana@Example.COM ", "password": "secreto123", "name": "  Ana  "},
    )
    assert r.status_code == 201
    user = r.json()["user"]
    assert user["email"] == "ana@example.com"
    assert user["name"] == "Ana"
    assert "createdAt" in user
    assert "password" not in user and "passwordHash" not in user


def test_register_duplicate_email_is_409(client):
    body = {"email": "ana@example.com", "password": "secreto123"}
    assert client.post("/auth/register", json=body).status_code == 201
    r = client.post("/auth/register", json={**body, "email": "ANA@example.com"})
    assert r.status_code == 409
    assert r.json()["detail"] == "Ese email ya está registrado."


def test_register_short_password_is_rejected(client):
    r = client.post("/auth/register", json={"email": "ana@example.com", "password": "corta"})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"


def test_login_returns_token_with_claims(client, auth_headers):
    r = client.post("/auth/login", json={"email": "ANA@example.com", "password": "secreto123"})
    assert r.status_code == 200
    data = r.json()
    assert token_user_id(data["token"]) == data["user"]["id"]
    claims = jwt.decode(data["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["email"] == "ana@example.com"
    assert claims["name"] == "Ana"


def test_login_bad_credentials_is_401(client, auth_headers):
    r = client.post("/auth/login", json={"email": "ana@example.com", "password": "incorrecta"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Credenciales inválidas."

    r = client.post("/auth/login", json={"email": "nadie@example.com", "password": "secreto123"})
    assert r.status_code == 401


def test_oauth2_token_form(client, auth_headers):
    r = client.post("/auth/token", data={"username": "ana@example.com", "password": "secreto123"})
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"
    assert r.json()["access_token"]


def test_me_requires_valid_token(client, auth_headers):
    r = client.get("/auth/me", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "ana@example.com"

    assert client.get("/auth/me").status_code == 401
    r = client.get("/auth/me", headers={"Authorization": "Bearer no-es-un-jwt"})
    assert r.status_code == 401
