"""
JobDash - Pydantic schemas for the tracker API wire format.

The API speaks camelCase JSON and uses `_id` for identifiers; these models
expose snake_case attributes and serialize back to camelCase.
Input models (`*Create`, `*Update`, credentials) validate before any
request is sent.
"""
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
import re

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class ApplicationStatus(str, Enum):
    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"


# --- Helper validators ---

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def validate_url(url: Optional[str]) -> Optional[str]:
    """Validate URL format if provided."""
    if url is None or url == "":
        return None
    url_pattern = re.compile(
        r'^https?://'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IP
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)
    if not url_pattern.match(url):
        raise ValueError('Please enter a valid URL')
    return url


def validate_email(email: Optional[str]) -> Optional[str]:
    """Validate email format if provided."""
    if email is None:
        return None
    if not EMAIL_PATTERN.match(email):
        raise ValueError('Invalid email format')
    return email


def require_text(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(message)
    return value.strip()


def normalize_calendar_date(value: Any) -> Optional[date]:
    """
    Reduce any date-like value to a calendar date.

    Datetimes with a timezone are converted to UTC first so the same
    instant always maps to the same day.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return normalize_calendar_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            raise ValueError(f"Invalid date: {value!r}")
    raise ValueError(f"Invalid date: {value!r}")


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self, partial: bool = False) -> Dict[str, Any]:
        """JSON-ready request body; `partial` sends only fields that were set."""
        if partial:
            return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ServerModel(ApiModel):
    """Server-owned entity; `_id` and `id` are both accepted."""
    id: str = Field(validation_alias=AliasChoices("_id", "id"))

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v


# --- Session Schemas ---

class User(ServerModel):
    name: str
    email: str
    profile_picture: Optional[str] = None


class AuthResponse(User):
    """Login/registration/profile response: the user plus an optional (rotated) token."""
    token: Optional[str] = None


class LoginRequest(ApiModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        return require_text(v, "Email is required")

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        if not v:
            raise ValueError("Password is required")
        return v


class RegisterRequest(LoginRequest):
    name: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return require_text(v, "Name is required")


class ProfileUpdate(ApiModel):
    """Partial profile update. A field given as None is an error, not a clear."""
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    profile_picture: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return require_text(v, "Name is required")

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        return require_text(v, "Email is required")


# --- Job Application Schemas ---

class ResumeRef(ServerModel):
    name: str = ""
    original_name: str = ""


class JobApplication(ServerModel):
    company: str
    role: str
    status: ApplicationStatus
    date_applied: date
    location: Optional[str] = None
    salary: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    contact_person: Optional[str] = None
    contact_email: Optional[str] = None
    resume: Optional[ResumeRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("date_applied", mode="before")
    @classmethod
    def normalize_date(cls, v):
        return normalize_calendar_date(v)

    @field_validator("resume", mode="before")
    @classmethod
    def expand_resume_id(cls, v):
        # unpopulated reference: the server sent only the id
        if isinstance(v, str):
            return {"id": v}
        return v


class JobApplicationCreate(ApiModel):
    company: str = Field(..., max_length=200)
    role: str = Field(..., max_length=200)
    status: ApplicationStatus = ApplicationStatus.APPLIED
    date_applied: date = Field(default_factory=date.today)
    location: Optional[str] = Field(None, max_length=200)
    salary: Optional[str] = Field(None, max_length=100)
    link: Optional[str] = Field(None, max_length=1000)
    description: Optional[str] = Field(None, max_length=50000)
    notes: Optional[str] = Field(None, max_length=5000)
    contact_person: Optional[str] = Field(None, max_length=200)
    contact_email: Optional[str] = Field(None, max_length=254)
    resume_id: Optional[str] = None

    @field_validator("company")
    @classmethod
    def check_company(cls, v):
        return require_text(v, "Company name is required")

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return require_text(v, "Job title is required")

    @field_validator("date_applied", mode="before")
    @classmethod
    def normalize_date(cls, v):
        return normalize_calendar_date(v) or date.today()

    @field_validator("link")
    @classmethod
    def check_link(cls, v):
        return validate_url(v)

    @field_validator("contact_email")
    @classmethod
    def check_contact_email(cls, v):
        return validate_email(v or None)


class JobApplicationUpdate(ApiModel):
    company: Optional[str] = Field(None, max_length=200)
    role: Optional[str] = Field(None, max_length=200)
    status: Optional[ApplicationStatus] = None
    date_applied: Optional[date] = None
    location: Optional[str] = Field(None, max_length=200)
    salary: Optional[str] = Field(None, max_length=100)
    link: Optional[str] = Field(None, max_length=1000)
    description: Optional[str] = Field(None, max_length=50000)
    notes: Optional[str] = Field(None, max_length=5000)
    contact_person: Optional[str] = Field(None, max_length=200)
    contact_email: Optional[str] = Field(None, max_length=254)
    resume_id: Optional[str] = None

    # validators only run for fields that were passed, so None here means
    # the caller asked to clear a required field
    @field_validator("company")
    @classmethod
    def check_company(cls, v):
        return require_text(v, "Company name is required")

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return require_text(v, "Job title is required")

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        if v is None:
            raise ValueError("Status is required")
        return v

    @field_validator("date_applied", mode="before")
    @classmethod
    def normalize_date(cls, v):
        value = normalize_calendar_date(v)
        if value is None:
            raise ValueError("Date applied is required")
        return value

    @field_validator("link")
    @classmethod
    def check_link(cls, v):
        return validate_url(v)

    @field_validator("contact_email")
    @classmethod
    def check_contact_email(cls, v):
        return validate_email(v or None)


# --- Resume Schemas ---

class Resume(ServerModel):
    name: str
    original_name: str
    file_size: int = 0
    content_type: str = "application/pdf"
    upload_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ResumeUpload(ApiModel):
    """Upload body: display name, original filename and base64 payload."""
    name: str
    file_name: str
    file_data: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return require_text(v, "Resume name is required")


# --- Company Schemas ---

class Company(ServerModel):
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    logo: Optional[str] = None
    location: Optional[str] = None
    size: Optional[str] = None
    job_count: int = 0


class CompanyCreate(ApiModel):
    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    website: Optional[str] = Field(None, max_length=500)
    industry: Optional[str] = Field(None, max_length=100)
    logo: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=200)
    size: Optional[str] = Field(None, max_length=50)
    job_count: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return require_text(v, "Company name is required")

    @field_validator("website")
    @classmethod
    def check_website(cls, v):
        return validate_url(v)


class CompanyUpdate(ApiModel):
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    website: Optional[str] = Field(None, max_length=500)
    industry: Optional[str] = Field(None, max_length=100)
    logo: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=200)
    size: Optional[str] = Field(None, max_length=50)
    job_count: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return require_text(v, "Company name is required")

    @field_validator("website")
    @classmethod
    def check_website(cls, v):
        return validate_url(v)


# --- Saved Job Schemas ---

class SavedJob(ServerModel):
    title: str
    company: str
    location: Optional[str] = None
    description: Optional[str] = None
    salary: Optional[str] = None
    job_type: Optional[str] = None
    url: Optional[str] = None
    source: str


class SavedJobCreate(ApiModel):
    title: str = Field(..., max_length=300)
    company: str = Field(..., max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=50000)
    salary: Optional[str] = Field(None, max_length=100)
    job_type: Optional[str] = Field(None, max_length=100)
    url: Optional[str] = Field(None, max_length=1000)
    source: str = Field(..., max_length=100)

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return require_text(v, "Job title is required")

    @field_validator("company")
    @classmethod
    def check_company(cls, v):
        return require_text(v, "Company name is required")

    @field_validator("source")
    @classmethod
    def check_source(cls, v):
        return require_text(v, "Source is required")

    @field_validator("url")
    @classmethod
    def check_url(cls, v):
        return validate_url(v)


# --- Stats/Analytics Schemas ---

class MonthlyTrendPoint(ApiModel):
    month: str
    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def default_count(cls, v):
        return 0 if v is None else v


class Statistics(ApiModel):
    """
    Server-computed aggregate. Absent parts default to empty, never None.

    Null counts read as 0; distribution entries that aren't whole numbers and
    trend points without a month are dropped rather than failing the fetch.
    """
    total_applications: int = 0
    monthly_applications: int = 0
    interviews_scheduled: int = 0
    response_rate: float = 0
    status_distribution: Dict[str, int] = Field(default_factory=dict)
    monthly_trend: List[MonthlyTrendPoint] = Field(default_factory=list)

    @field_validator(
        "total_applications", "monthly_applications", "interviews_scheduled", "response_rate",
        mode="before",
    )
    @classmethod
    def default_numbers(cls, v):
        return 0 if v is None else v

    @field_validator("status_distribution", mode="before")
    @classmethod
    def default_distribution(cls, v):
        if not isinstance(v, dict):
            return {}
        return {
            str(status): 0 if count is None else count
            for status, count in v.items()
            if count is None or (isinstance(count, int) and not isinstance(count, bool))
        }

    @field_validator("monthly_trend", mode="before")
    @classmethod
    def default_trend(cls, v):
        if not isinstance(v, list):
            return []
        return [
            point for point in v
            if isinstance(point, MonthlyTrendPoint)
            or (isinstance(point, dict) and isinstance(point.get("month"), str))
        ]
