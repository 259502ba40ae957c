"""Application-level tests: health, authentication and error shape."""

from jose import jwt

from src.config import get_settings
from src.models.user import User


def _bearer(subject: str, email: str) -> dict:
    settings = get_settings()
    token = jwt.encode(
        {"sub": subject, "email": email},
        settings.auth_jwt_secret,
        algorithm=settings.auth_jwt_algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    """Test the health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_missing_token(client):
    """Test that requests without a token are rejected."""
    response = client.get("/api/v1/kitchens")
    assert response.status_code in (401, 403)


def test_invalid_token(client):
    """Test that a malformed token is rejected."""
    response = client.get("/api/v1/kitchens", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_token_signed_with_wrong_key(client):
    """Test that a token signed with another key is rejected."""
    token = jwt.encode({"sub": "user_test"}, "wrong-secret", algorithm="HS256")
    response = client.get("/api/v1/kitchens", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_user_provisioned_on_first_request(client, db):
    """Test that a new token subject gets exactly one local user."""
    headers = _bearer("user_new", "new@example.com")
    response = client.get("/api/v1/kitchens", headers=headers)
    assert response.status_code == 200

    user = db.query(User).filter(User.external_id == "user_new").one()
    assert user.email == "new@example.com"

    client.get("/api/v1/kitchens", headers=headers)
    assert db.query(User).filter(User.external_id == "user_new").count() == 1


def test_request_validation_error_shape(client, auth_headers):
    """Test that body validation errors use the invalid_input shape."""
    response = client.post("/api/v1/kitchens", headers=auth_headers, json={})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "invalid_input"
    assert "name" in data["detail"]
