"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Grant cycles
# ---------------------------------------------------------------------------


class GrantCycleConfigModel(Base):
    __tablename__ = "grant_cycle_configs"
    __table_args__ = (UniqueConstraint("cycle", "year", name="uq_grant_cycle_year"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    cycle = Column(String, nullable=False)  # "SPRING" | "FALL"
    year = Column(Integer, nullable=False)
    loi_open_date = Column(DateTime(timezone=True), nullable=True)
    loi_deadline = Column(DateTime(timezone=True), nullable=True)
    full_app_open_date = Column(DateTime(timezone=True), nullable=True)
    full_app_deadline = Column(DateTime(timezone=True), nullable=True)
    max_request_amount = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
    accepting_lois = Column(Boolean, nullable=False, default=False)
    accepting_applications = Column(Boolean, nullable=False, default=False)
    internal_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)


# ---------------------------------------------------------------------------
# Applicant organizations and users
# ---------------------------------------------------------------------------


class OrganizationModel(Base):
    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=_new_id)
    legal_name = Column(Text, nullable=False)
    ein = Column(String(10), unique=True, nullable=False)
    dba_name = Column(Text, nullable=True)
    website = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    address_line2 = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(String(2), nullable=True)
    zip_code = Column(String(10), nullable=True)
    mission_statement = Column(Text, nullable=True)
    is_501c3 = Column(Boolean, nullable=True)
    year_founded = Column(Integer, nullable=True)
    annual_budget = Column(Numeric(14, 2), nullable=True)
    executive_director_name = Column(Text, nullable=True)
    executive_director_email = Column(Text, nullable=True)
    profile_complete = Column(Boolean, nullable=False, default=False)
    profile_completed_at = Column(DateTime(timezone=True), nullable=True)
    profile_last_reviewed_at = Column(DateTime(timezone=True), nullable=True)
    profile_last_reviewed_for_cycle = Column(
        String(36), ForeignKey("grant_cycle_configs.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)

    users = relationship("UserModel", back_populates="organization")
    documents = relationship(
        "DocumentModel", back_populates="organization", cascade="all, delete-orphan"
    )
    applications = relationship(
        "ApplicationModel", back_populates="organization", cascade="all, delete-orphan"
    )


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    external_id = Column(Text, unique=True, nullable=False)
    email = Column(Text, nullable=False)
    first_name = Column(Text, nullable=True)
    last_name = Column(Text, nullable=True)
    organization_id = Column(
        String(36), ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime(timezone=True), default=_now)

    organization = relationship("OrganizationModel", back_populates="users")


class ApplicationModel(Base):
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(
        String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    cycle_id = Column(String(36), ForeignKey("grant_cycle_configs.id"), nullable=True)
    status = Column(String, nullable=False, default="DRAFT")
    project_title = Column(Text, nullable=True)
    amount_requested = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)

    organization = relationship("OrganizationModel", back_populates="applications")


class DocumentModel(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=_new_id)
    organization_id = Column(
        String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=True
    )
    application_id = Column(
        String(36), ForeignKey("applications.id", ondelete="CASCADE"), nullable=True
    )
    scope = Column(String, nullable=False, default="ORGANIZATION")  # "ORGANIZATION" | "APPLICATION"
    type = Column(String, nullable=False)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    file_name = Column(Text, nullable=False)
    file_url = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    mime_type = Column(Text, nullable=False)
    document_year = Column(Integer, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), default=_now)

    organization = relationship("OrganizationModel", back_populates="documents")
