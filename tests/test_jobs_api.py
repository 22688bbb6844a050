def _register(client, *, email: str, role: str, name: str = "Test User") -> str:
    r = client.post(
        "/auth/register",
        json={"email": email, "password": "Testpass123!", "role": role, "name": name},
    )
    assert r.status_code == 201, r.text
    return r.json()["access_token"]


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _job_body(**overrides) -> dict:
    body = {
        "title": "Backend Engineer",
        "description": "Build APIs with Python and FastAPI.",
        "company": "Acme",
        "location": "Berlin, Germany",
        "type": "full-time",
        "category": "Engineering",
        "salary": {"min": 60000, "max": 90000},
        "requirements": {"experience": "3+ years", "skills": ["python", "sql"]},
        "benefits": ["Remote days", "Gym"],
    }
    body.update(overrides)
    return body


def test_jobseeker_cannot_create_job(client):
    token = _register(client, email="seeker@example.com", role="jobseeker")
    r = client.post("/jobs", json=_job_body(), headers=_auth_headers(token))
    assert r.status_code == 403, r.text


def test_create_job_requires_auth(client):
    r = client.post("/jobs", json=_job_body())
    assert r.status_code == 401, r.text


def test_employer_creates_job(client):
    token = _register(client, email="emp@example.com", role="employer", name="Emp")
    r = client.post("/jobs", json=_job_body(), headers=_auth_headers(token))
    assert r.status_code == 201, r.text
    job = r.json()["job"]
    assert job["title"] == "Backend Engineer"
    assert job["status"] == "active"
    assert job["applicationsCount"] == 0
    assert job["salary"] == {"min": 60000, "max": 90000, "currency": "USD"}
    assert job["requirements"]["skills"] == ["python", "sql"]
    assert job["benefits"] == ["Remote days", "Gym"]
    assert job["postedBy"]["name"] == "Emp"


def test_create_job_reports_missing_field(client):
    token = _register(client, email="emp2@example.com", role="employer")
    body = _job_body()
    del body["company"]
    r = client.post("/jobs", json=body, headers=_auth_headers(token))
    assert r.status_code == 400, r.text
    assert r.json()["details"]["field"] == "company"


def test_create_job_rejects_unknown_type(client):
    token = _register(client, email="emp3@example.com", role="employer")
    r = client.post("/jobs", json=_job_body(type="gig"), headers=_auth_headers(token))
    assert r.status_code == 400, r.text
    assert r.json()["details"]["field"] == "type"


def test_create_job_rejects_inverted_salary(client):
    token = _register(client, email="emp4@example.com", role="employer")
    r = client.post(
        "/jobs",
        json=_job_body(salary={"min": 100, "max": 50}),
        headers=_auth_headers(token),
    )
    assert r.status_code == 400, r.text


def test_create_job_ignores_client_counter(client):
    token = _register(client, email="emp5@example.com", role="employer")
    r = client.post("/jobs", json=_job_body(applicationsCount=42), headers=_auth_headers(token))
    assert r.status_code == 201, r.text
    assert r.json()["job"]["applicationsCount"] == 0


def test_get_job_and_404(client):
    token = _register(client, email="emp6@example.com", role="employer")
    job = client.post("/jobs", json=_job_body(), headers=_auth_headers(token)).json()["job"]

    r = client.get(f"/jobs/{job['id']}")
    assert r.status_code == 200, r.text
    assert r.json()["job"]["id"] == job["id"]

    missing = client.get("/jobs/99999")
    assert missing.status_code == 404, missing.text
    assert "not found" in missing.json()["error"].lower()


def test_draft_job_hidden_from_others(client):
    owner = _register(client, email="owner@example.com", role="employer")
    other = _register(client, email="other@example.com", role="employer")
    job = client.post("/jobs", json=_job_body(status="draft"), headers=_auth_headers(owner)).json()["job"]

    assert client.get(f"/jobs/{job['id']}").status_code == 404
    assert client.get(f"/jobs/{job['id']}", headers=_auth_headers(other)).status_code == 404
    assert client.get(f"/jobs/{job['id']}", headers=_auth_headers(owner)).status_code == 200


def test_owner_updates_job_status_freely(client):
    token = _register(client, email="emp7@example.com", role="employer")
    job = client.post("/jobs", json=_job_body(), headers=_auth_headers(token)).json()["job"]

    for status in ("closed", "draft", "active", "closed"):
        r = client.put(f"/jobs/{job['id']}", json={"status": status}, headers=_auth_headers(token))
        assert r.status_code == 200, r.text
        assert r.json()["job"]["status"] == status

    r = client.put(
        f"/jobs/{job['id']}",
        json={"title": "Senior Backend Engineer", "salary": {"max": 120000}, "applicationsCount": 99},
        headers=_auth_headers(token),
    )
    assert r.status_code == 200, r.text
    updated = r.json()["job"]
    assert updated["title"] == "Senior Backend Engineer"
    assert updated["salary"]["min"] == 60000
    assert updated["salary"]["max"] == 120000
    assert updated["applicationsCount"] == 0


def test_update_rejects_invalid_status(client):
    token = _register(client, email="emp8@example.com", role="employer")
    job = client.post("/jobs", json=_job_body(), headers=_auth_headers(token)).json()["job"]
    r = client.put(f"/jobs/{job['id']}", json={"status": "archived"}, headers=_auth_headers(token))
    assert r.status_code == 400, r.text


def test_non_owner_cannot_update_or_delete(client):
    owner = _register(client, email="own2@example.com", role="employer")
    intruder = _register(client, email="intruder@example.com", role="employer")
    job = client.post("/jobs", json=_job_body(), headers=_auth_headers(owner)).json()["job"]

    r = client.put(f"/jobs/{job['id']}", json={"title": "Hacked"}, headers=_auth_headers(intruder))
    assert r.status_code == 403, r.text
    r = client.delete(f"/jobs/{job['id']}", headers=_auth_headers(intruder))
    assert r.status_code == 403, r.text
    assert client.get(f"/jobs/{job['id']}").json()["job"]["title"] == "Backend Engineer"


def test_admin_can_update_and_delete_any_job(client, db_session):
    from backend.app.models.user import User

    owner = _register(client, email="own3@example.com", role="employer")
    admin = _register(client, email="admin@example.com", role="jobseeker", name="Admin")
    user = db_session.query(User).filter(User.email == "admin@example.com").one()
    user.role = "admin"
    db_session.commit()

    job = client.post("/jobs", json=_job_body(), headers=_auth_headers(owner)).json()["job"]
    r = client.put(f"/jobs/{job['id']}", json={"status": "closed"}, headers=_auth_headers(admin))
    assert r.status_code == 200, r.text
    r = client.delete(f"/jobs/{job['id']}", headers=_auth_headers(admin))
    assert r.status_code == 200, r.text
    assert client.get(f"/jobs/{job['id']}").status_code == 404


def test_delete_job_removes_its_applications(client, db_session):
    from backend.app.models.application import Application

    owner = _register(client, email="own4@example.com", role="employer")
    seeker = _register(client, email="seek4@example.com", role="jobseeker")
    job = client.post("/jobs", json=_job_body(), headers=_auth_headers(owner)).json()["job"]
    applied = client.post(
        "/applications",
        json={"jobId": job["id"], "coverLetter": "Hi", "resume": "https://cdn.test/cv.pdf"},
        headers=_auth_headers(seeker),
    )
    assert applied.status_code == 201, applied.text

    r = client.delete(f"/jobs/{job['id']}", headers=_auth_headers(owner))
    assert r.status_code == 200, r.text
    assert r.json()["deleted_applications"] == 1
    assert db_session.query(Application).filter(Application.job_id == job["id"]).count() == 0

    mine = client.get("/applications/my-applications", headers=_auth_headers(seeker))
    assert mine.json()["applications"] == []


def test_my_jobs_lists_own_jobs_with_live_counts(client):
    owner = _register(client, email="own5@example.com", role="employer")
    other = _register(client, email="other5@example.com", role="employer")
    seeker = _register(client, email="seek5@example.com", role="jobseeker")

    first = client.post("/jobs", json=_job_body(title="First"), headers=_auth_headers(owner)).json()["job"]
    client.post("/jobs", json=_job_body(title="Second", status="draft"), headers=_auth_headers(owner))
    client.post("/jobs", json=_job_body(title="Not mine"), headers=_auth_headers(other))
    client.post(
        "/applications",
        json={"jobId": first["id"], "coverLetter": "Hi", "resume": "https://cdn.test/cv.pdf"},
        headers=_auth_headers(seeker),
    )

    r = client.get("/jobs/employer/my-jobs", headers=_auth_headers(owner))
    assert r.status_code == 200, r.text
    jobs = r.json()["jobs"]
    assert [j["title"] for j in jobs] == ["Second", "First"]
    assert {j["title"]: j["applicationsCount"] for j in jobs} == {"First": 1, "Second": 0}

    assert client.get("/jobs/employer/my-jobs", headers=_auth_headers(seeker)).status_code == 403
