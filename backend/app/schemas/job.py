from pydantic import BaseModel, ConfigDict, Field


class SalaryIn(BaseModel):
    min: int | None = None
    max: int | None = None
    currency: str | None = Field(default=None, max_length=5)


class RequirementsIn(BaseModel):
    experience: str | None = Field(default=None, max_length=255)
    education: str | None = Field(default=None, max_length=255)
    skills: list[str] | None = None


class JobCreate(BaseModel):
    # Required-ness is checked at runtime so errors come back per field as 400s.
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    company: str | None = None
    location: str | None = None
    type: str | None = None
    category: str | None = None
    salary: SalaryIn | None = None
    requirements: RequirementsIn | None = None
    benefits: list[str] | None = None
    application_deadline: str | None = Field(default=None, alias="applicationDeadline")  # ISO date/datetime
    status: str | None = "active"  # active/closed/draft


class JobUpdate(BaseModel):
    """Partial update; `applicationsCount` and `postedBy` are not accepted."""
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    company: str | None = None
    location: str | None = None
    type: str | None = None
    category: str | None = None
    salary: SalaryIn | None = None
    requirements: RequirementsIn | None = None
    benefits: list[str] | None = None
    application_deadline: str | None = Field(default=None, alias="applicationDeadline")
    status: str | None = None
