"""Value sets for the string-typed status/role/type columns."""

ROLE_JOBSEEKER = "jobseeker"
ROLE_EMPLOYER = "employer"
ROLE_ADMIN = "admin"
ROLES = (ROLE_JOBSEEKER, ROLE_EMPLOYER, ROLE_ADMIN)
# admin accounts are created with `backend/migrate.py create-admin`
SELF_SERVICE_ROLES = (ROLE_JOBSEEKER, ROLE_EMPLOYER)

JOB_TYPES = ("full-time", "part-time", "contract", "internship", "freelance")

JOB_ACTIVE = "active"
JOB_CLOSED = "closed"
JOB_DRAFT = "draft"
JOB_STATUSES = (JOB_ACTIVE, JOB_CLOSED, JOB_DRAFT)

APP_PENDING = "pending"
APP_REVIEWED = "reviewed"
APP_SHORTLISTED = "shortlisted"
APP_REJECTED = "rejected"
APP_HIRED = "hired"
APPLICATION_STATUSES = (APP_PENDING, APP_REVIEWED, APP_SHORTLISTED, APP_REJECTED, APP_HIRED)
