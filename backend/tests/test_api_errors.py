"""
API error handling integration tests.
Runs against the real `backend.app.main` app with its DB dependency overridden.
"""
import pytest
from fastapi.testclient import TestClient

from backend.app.main import app
from backend.app.database import Base, get_db, make_engine, make_session_factory

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_api_errors.db"
engine = make_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = make_session_factory(engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
client = TestClient(app)


@pytest.fixture(scope="function", autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _signup(email: str, role: str) -> dict:
    response = client.post("/auth/register", json={
        "email": email,
        "password": "password123",
        "role": role,
        "name": "Test User"
    })
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class TestAuthValidation:
    def test_register_invalid_email(self):
        response = client.post("/auth/register", json={
            "email": "invalid-email",
            "password": "password123",
            "role": "employer",
            "name": "Test User"
        })
        assert response.status_code == 400
        data = response.json()
        assert "email" in data["error"].lower()
        assert data["details"]["field"] == "email"

    def test_register_weak_password(self):
        response = client.post("/auth/register", json={
            "email": "test@example.com",
            "password": "123",
            "role": "employer",
            "name": "Test User"
        })
        assert response.status_code == 400
        assert "password" in response.json()["error"].lower()

    def test_register_invalid_role(self):
        response = client.post("/auth/register", json={
            "email": "test@example.com",
            "password": "password123",
            "role": "recruiter",
            "name": "Test User"
        })
        assert response.status_code == 400
        assert "role" in response.json()["error"].lower()

    def test_register_as_admin_is_refused(self):
        response = client.post("/auth/register", json={
            "email": "root@example.com",
            "password": "password123",
            "role": "admin",
            "name": "Root"
        })
        assert response.status_code == 400

    def test_register_duplicate_email(self):
        _signup("duplicate@example.com", "employer")
        response = client.post("/auth/register", json={
            "email": "DUPLICATE@example.com",
            "password": "password123",
            "role": "jobseeker",
            "name": "Test User 2"
        })
        assert response.status_code == 400
        assert "exists" in response.json()["error"].lower()

    def test_login_invalid_credentials(self):
        response = client.post("/auth/login", json={
            "email": "nonexistent@example.com",
            "password": "wrongpassword"
        })
        assert response.status_code == 401
        assert "invalid email or password" in response.json()["error"].lower()


class TestJobValidation:
    def setup_method(self):
        Base.metadata.create_all(bind=engine)
        self.headers = _signup("employer@example.com", "employer")

    def test_create_job_missing_title(self):
        response = client.post("/jobs", headers=self.headers, json={
            "description": "Test description",
            "company": "Acme",
            "location": "Remote",
            "type": "contract",
            "category": "IT",
        })
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "title"

    def test_create_job_invalid_status(self):
        response = client.post("/jobs", headers=self.headers, json={
            "title": "Valid Title",
            "description": "Valid description",
            "company": "Acme",
            "location": "Remote",
            "type": "contract",
            "category": "IT",
            "status": "invalid_status"
        })
        assert response.status_code == 400

    def test_create_job_invalid_type(self):
        response = client.post("/jobs", headers=self.headers, json={
            "title": "Valid Title",
            "description": "Valid description",
            "company": "Acme",
            "location": "Remote",
            "type": "gig",
            "category": "IT",
        })
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "type"

    def test_get_nonexistent_job(self):
        response = client.get("/jobs/99999", headers=self.headers)
        assert response.status_code == 404
        assert "not found" in response.json()["error"].lower()


class TestUnauthorizedAccess:
    def test_jobs_without_token(self):
        response = client.post("/jobs", json={
            "title": "Test Job",
            "description": "Test description"
        })
        assert response.status_code == 401

    def test_applications_without_token(self):
        assert client.get("/applications/my-applications").status_code == 401

    def test_garbage_token(self):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["success"] is False


class TestErrorResponseFormat:
    def test_error_has_success_false(self):
        response = client.post("/auth/login", json={
            "email": "bad@example.com",
            "password": "wrong"
        })
        data = response.json()
        assert data["success"] is False
        assert data["status_code"] == 401

    def test_unknown_route_uses_envelope(self):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestHealthCheck:
    def test_health_endpoint(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_routes_are_not_under_api_prefix(self):
        assert client.get("/api/health").status_code == 404
        assert client.get("/api/jobs").status_code == 404
        assert client.get("/jobs").status_code == 200


class TestErrorLogging:
    """Verify bad input does not crash the application"""

    def test_malformed_json(self):
        response = client.post(
            "/auth/register",
            content="not valid json",
            headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400

    def test_missing_required_field(self):
        response = client.post("/auth/register", json={
            "email": "test@example.com"
            # Missing password and name
        })
        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert {"password", "name"} <= fields


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
