"""Authentication API tests."""

from datetime import timedelta

from task_manager.models.user import User
from task_manager.services.auth import create_access_token


def test_root_describes_api(client):
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["endpoints"]["tasks"] == "/api/tasks"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client):
    """Test user registration."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Amy", "email": "a@x.com", "password": "secret123"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    assert body["data"]["name"] == "Amy"
    assert body["data"]["email"] == "a@x.com"
    assert body["data"]["token"]
    assert "password" not in body["data"]
    assert "passwordHash" not in body["data"]


def test_register_normalizes_email(client):
    """Test that emails are stored lower-cased."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Amy", "email": "Amy@Example.COM", "password": "secret123"},
    )
    assert response.status_code == 201
    assert response.json()["data"]["email"] == "amy@example.com"


def test_register_stores_password_hash(client, db):
    """Test that the plaintext password is never stored."""
    client.post(
        "/api/auth/register",
        json={"name": "Amy", "email": "a@x.com", "password": "secret123"},
    )
    user = db.query(User).filter(User.email == "a@x.com").one()
    assert user.password_hash != "secret123"
    assert user.password_hash.startswith("$2")


def test_register_duplicate_email(client, auth_headers, db):
    """Test registration with duplicate email fails and keeps the first user."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Duplicate", "email": auth_headers.email, "password": "password123"},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["message"] == "User already exists with this email"

    users = db.query(User).filter(User.email == auth_headers.email).all()
    assert len(users) == 1
    assert users[0].name == "Test User"


def test_register_duplicate_email_different_case(client, auth_headers):
    """Test that case differences do not bypass the duplicate check."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Shouty", "email": "TEST@example.com", "password": "password123"},
    )
    assert response.status_code == 400


def test_register_validation_lists_every_field(client):
    """Test that all violated rules are reported together."""
    response = client.post(
        "/api/auth/register",
        json={"name": "", "email": "not-an-email", "password": "123"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    errors = {e["field"]: e["message"] for e in body["errors"]}
    assert errors == {
        "name": "Name is required",
        "email": "Please provide a valid email",
        "password": "Password must be at least 6 characters",
    }
    assert "Name is required" in body["message"]


def test_register_missing_fields(client):
    """Test registration with an empty body."""
    response = client.post("/api/auth/register", json={})
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"name", "email", "password"}


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["data"]["id"] == auth_headers.user_id
    assert body["data"]["token"]


def test_login_is_case_insensitive_on_email(client, auth_headers):
    """Test login with a differently cased email."""
    response = client.post(
        "/api/auth/login", json={"email": "Test@Example.com", "password": "testpass123"}
    )
    assert response.status_code == 200


def test_login_failures_are_indistinguishable(client, auth_headers):
    """Wrong password and unknown email give the same status and message."""
    wrong_password = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "testpass123"}
    )
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["message"] == "Invalid email or password"


def test_login_requires_password(client):
    """Test login validation."""
    response = client.post("/api/auth/login", json={"email": "a@x.com"})
    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "password", "message": "Password is required"}]


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == auth_headers.user_id
    assert data["email"] == auth_headers.email
    assert data["name"] == "Test User"
    assert "createdAt" in data


def test_envelope_omits_empty_keys(client, auth_headers):
    """Test that unset envelope keys are left out of the body."""
    response = client.get("/api/auth/me", headers=auth_headers)
    body = response.json()
    assert set(body) == {"success", "data"}

    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.json() == {"success": True, "message": "Logged out successfully"}


def test_register_login_me_scenario(client):
    """Register, log in again, and fetch the profile with the new token."""
    register = client.post(
        "/api/auth/register",
        json={"name": "Amy", "email": "a@x.com", "password": "secret123"},
    )
    assert register.status_code == 201
    assert register.json()["data"]["token"]

    login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret123"})
    assert login.status_code == 200
    token = login.json()["data"]["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["name"] == "Amy"


def test_me_without_token(client):
    """Test that the profile endpoint requires a token."""
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Not authorized, no token provided"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_me_with_non_bearer_scheme(client):
    """Test that other authorization schemes are treated as missing."""
    response = client.get("/api/auth/me", headers={"Authorization": "Basic abc123"})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token provided"


def test_me_with_garbage_token(client):
    """Test that malformed tokens are rejected."""
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, token failed"


def test_me_with_expired_token(client, auth_headers):
    """Test that expired tokens are rejected."""
    token = create_access_token(auth_headers.user_id, expires_delta=timedelta(minutes=-5))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, token failed"


def test_me_for_deleted_user(client, auth_headers, db):
    """Test that a valid token for a removed user is rejected."""
    db.query(User).filter(User.id == auth_headers.user_id).delete()
    db.commit()

    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


def test_logout(client, auth_headers):
    """Test logout acknowledges without server-side state."""
    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"

    # Tokens are stateless, so the same token still works until it expires
    assert client.get("/api/auth/me", headers=auth_headers).status_code == 200
