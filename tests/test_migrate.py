from backend import migrate
from backend.app.models.job import Job
from backend.app.models.user import User


def test_create_admin(app, db_session, capsys):
    code = migrate.main(["create-admin", "--email", "Root@Example.com", "--password", "secret123", "--name", "Root"])
    assert code == 0
    assert "Created admin" in capsys.readouterr().out

    admin = db_session.query(User).filter(User.email == "root@example.com").one()
    assert admin.role == "admin"
    assert admin.password != "secret123"

    assert migrate.main(["create-admin", "--email", "root@example.com", "--password", "secret123"]) == 1
    assert "already exists" in capsys.readouterr().out


def test_create_admin_rejects_bad_input(app, capsys):
    assert migrate.main(["create-admin", "--email", "nope", "--password", "secret123"]) == 1
    assert "Invalid email" in capsys.readouterr().out


def test_recount(app, db_session, capsys):
    owner = User(name="O", email="o@example.com", password="hashed", role="employer")
    db_session.add(owner)
    db_session.commit()
    job = Job(
        posted_by_id=owner.id,
        title="Drifted",
        description="Counter drifted",
        company="Acme",
        location="Remote",
        job_type="full-time",
        category="IT",
        applications_count=3,
    )
    db_session.add(job)
    db_session.commit()

    assert migrate.main(["recount"]) == 0
    assert f"job {job.id}: 3 -> 0" in capsys.readouterr().out

    db_session.refresh(job)
    assert job.applications_count == 0

    assert migrate.main(["recount", "--job-id", str(job.id)]) == 0
    assert "already consistent" in capsys.readouterr().out
