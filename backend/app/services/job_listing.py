"""Public job search: filters, sorting and pagination over active jobs."""
import math
from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ..config import JOBS_MAX_PAGE_SIZE, JOBS_PAGE_SIZE
from ..models.choices import JOB_ACTIVE
from ..models.job import Job

# Public sort keys -> columns
SORT_FIELDS = {
    "createdAt": Job.created_at,
    "updatedAt": Job.updated_at,
    "title": Job.title,
    "company": Job.company,
    "location": Job.location,
    "category": Job.category,
    "type": Job.job_type,
    "salary": Job.salary_min,
    "salaryMin": Job.salary_min,
    "salaryMax": Job.salary_max,
    "applicationDeadline": Job.application_deadline,
    "applicationsCount": Job.applications_count,
}
DEFAULT_SORT = "createdAt"


@dataclass
class JobFilter:
    search: str | None = None
    location: str | None = None
    job_type: str | None = None
    category: str | None = None
    sort_by: str = DEFAULT_SORT
    sort_order: str = "desc"
    page: int = 1
    page_size: int = JOBS_PAGE_SIZE


@dataclass
class JobPage:
    jobs: list[Job]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


def _contains(column, term: str):
    # `%`/`_` in user input are literal
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def _clean(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def search_jobs(db: Session, filters: JobFilter) -> JobPage:
    page = max(int(filters.page or 1), 1)
    page_size = min(max(int(filters.page_size or JOBS_PAGE_SIZE), 1), JOBS_MAX_PAGE_SIZE)

    q = db.query(Job).filter(Job.status == JOB_ACTIVE)

    search = _clean(filters.search)
    if search:
        q = q.filter(
            or_(
                _contains(Job.title, search),
                _contains(Job.description, search),
                _contains(Job.company, search),
                _contains(Job.location, search),
                _contains(Job.category, search),
            )
        )

    location = _clean(filters.location)
    if location:
        q = q.filter(_contains(Job.location, location))

    job_type = _clean(filters.job_type)
    if job_type:
        q = q.filter(Job.job_type == job_type.lower())

    category = _clean(filters.category)
    if category:
        q = q.filter(_contains(Job.category, category))

    total = q.count()

    column = SORT_FIELDS.get(filters.sort_by or DEFAULT_SORT, SORT_FIELDS[DEFAULT_SORT])
    descending = (filters.sort_order or "desc").lower() != "asc"
    order = column.desc() if descending else column.asc()
    # id as tie-breaker keeps pages stable
    tie = Job.id.desc() if descending else Job.id.asc()

    jobs = (
        q.options(joinedload(Job.poster))
        .order_by(order, tie)
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return JobPage(jobs=jobs, total=total, page=page, page_size=page_size)
