"""Pydantic request/response models for REST API.

JSON field names are camelCase on the wire; Python attributes stay
snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Grant cycles
# ---------------------------------------------------------------------------


class CycleSummarySchema(ApiModel):
    """Applicant-safe view of a grant cycle."""

    id: str
    cycle: str
    year: int
    loi_open_date: datetime | None = None
    loi_deadline: datetime | None = None
    full_app_open_date: datetime | None = None
    full_app_deadline: datetime | None = None
    max_request_amount: float | None = None
    is_active: bool
    accepting_lois: bool = Field(alias="acceptingLOIs")
    accepting_applications: bool


class CycleSchema(CycleSummarySchema):
    """Full cycle record, admin only."""

    internal_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CycleCreateRequest(ApiModel):
    cycle: Literal["SPRING", "FALL"]
    year: int = Field(ge=2000, le=2100)
    loi_open_date: datetime | None = None
    loi_deadline: datetime | None = None
    full_app_open_date: datetime | None = None
    full_app_deadline: datetime | None = None
    max_request_amount: float | None = Field(default=None, ge=0)
    is_active: bool = False
    accepting_lois: bool = Field(default=False, alias="acceptingLOIs")
    accepting_applications: bool = False
    internal_notes: str | None = None


class CycleUpdateRequest(ApiModel):
    is_active: bool | None = None
    accepting_lois: bool | None = Field(default=None, alias="acceptingLOIs")
    accepting_applications: bool | None = None
    internal_notes: str | None = None


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------

REQUIRED_PROFILE_FIELDS = (
    "legal_name",
    "ein",
    "address",
    "city",
    "state",
    "zip_code",
    "phone",
    "mission_statement",
    "is_501c3",
    "executive_director_name",
    "executive_director_email",
)


def profile_completion(values: dict[str, Any]) -> int:
    """Percentage of required profile fields that are filled in."""
    filled = [f for f in REQUIRED_PROFILE_FIELDS if values.get(f) not in (None, "")]
    return round(len(filled) * 100 / len(REQUIRED_PROFILE_FIELDS))


class OrganizationProfileRequest(ApiModel):
    legal_name: str = Field(min_length=1)
    dba_name: str | None = None
    ein: str = Field(pattern=r"^\d{2}-\d{7}$")
    year_founded: int | None = Field(default=None, ge=1800)
    address: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, min_length=2, max_length=2)
    zip_code: str | None = Field(default=None, pattern=r"^\d{5}(-\d{4})?$")
    phone: str | None = Field(default=None, min_length=10)
    website: str | None = None
    mission_statement: str | None = Field(default=None, min_length=20)
    is_501c3: bool | None = Field(default=None, alias="is501c3")
    executive_director_name: str | None = None
    executive_director_email: str | None = Field(default=None, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    annual_budget: float | None = Field(default=None, ge=0)

    @field_validator("year_founded")
    @classmethod
    def not_in_future(cls, v: int | None) -> int | None:
        if v is not None and v > datetime.now().year:
            raise ValueError("Year founded cannot be in the future")
        return v


class OrganizationSchema(ApiModel):
    id: str
    legal_name: str
    dba_name: str | None = None
    ein: str
    year_founded: int | None = None
    address: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    phone: str | None = None
    website: str | None = None
    mission_statement: str | None = None
    is_501c3: bool | None = Field(default=None, alias="is501c3")
    executive_director_name: str | None = None
    executive_director_email: str | None = None
    annual_budget: float | None = None
    profile_complete: bool = False
    profile_completed_at: datetime | None = None
    profile_last_reviewed_at: datetime | None = None
    profile_last_reviewed_for_cycle: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewProfileRequest(ApiModel):
    cycle_id: str | None = None


class ReviewProfileResponse(ApiModel):
    success: bool = True
    profile_last_reviewed_at: datetime
    profile_last_reviewed_for_cycle: str


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class DocumentSchema(ApiModel):
    id: str
    organization_id: str | None = None
    application_id: str | None = None
    scope: str
    type: str
    name: str
    description: str | None = None
    file_name: str
    file_url: str
    file_size: int
    mime_type: str
    document_year: int | None = None
    uploaded_at: datetime | None = None


# ---------------------------------------------------------------------------
# Staff administration
# ---------------------------------------------------------------------------


class MembershipSchema(ApiModel):
    id: str
    user_id: str
    role: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    created_at: int | None = None


class ReviewerListResponse(ApiModel):
    reviewers: list[MembershipSchema]


class RoleUpdateRequest(ApiModel):
    role: str | None = None


class RoleUpdateResponse(ApiModel):
    success: bool = True
    membership: MembershipSchema


class StaffInviteRequest(ApiModel):
    email: str | None = None
    role: str | None = None


class ApplicantInviteRequest(ApiModel):
    email: str | None = None


class SuccessResponse(ApiModel):
    success: bool = True
    message: str | None = None


class ResetSampleDataResponse(ApiModel):
    success: bool = True
    deleted_count: int


class AdminCheckResponse(ApiModel):
    is_admin: bool


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class MeResponse(ApiModel):
    external_id: str
    email: str
    name: str
    role: str
    organization_id: str | None = None
    is_reviewer: bool
    is_manager: bool
    is_admin: bool


class PageAccessResponse(ApiModel):
    allowed: bool
    redirect: str | None = None
