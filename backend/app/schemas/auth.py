from pydantic import BaseModel, Field


class ProfileFields(BaseModel):
    phone: str | None = Field(default=None, max_length=50)
    location: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=5000)
    skills: list[str] | None = None
    experience: str | None = Field(default=None, max_length=5000)
    education: str | None = Field(default=None, max_length=5000)
    resume: str | None = Field(default=None, max_length=500)  # URL


class CompanyFields(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    website: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    role: str = "jobseeker"  # jobseeker / employer
    profile: ProfileFields | None = None
    company: CompanyFields | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    name: str | None = None
    profile: ProfileFields | None = None
    company: CompanyFields | None = None
