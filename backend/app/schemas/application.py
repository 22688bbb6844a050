from pydantic import BaseModel, ConfigDict, Field


class ApplicationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_id: int = Field(alias="jobId", ge=1)
    cover_letter: str | None = Field(default=None, alias="coverLetter")
    resume: str | None = None  # URL to the resume file


class StatusUpdate(BaseModel):
    status: str
    notes: str | None = Field(default=None, max_length=5000)


class ReviewNotes(BaseModel):
    notes: str | None = Field(default=None, max_length=5000)
