"""SQLAlchemy ORM models for employment eligibility: Form I-9 records and E-Verify cases."""

from __future__ import annotations

import enum
from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class CitizenshipStatus(str, enum.Enum):
    CITIZEN = "citizen"
    NATIONAL = "national"
    PERMANENT_RESIDENT = "permanent_resident"
    AUTHORIZED_ALIEN = "authorized_alien"


class I9Status(str, enum.Enum):
    NOT_STARTED = "not_started"
    SECTION1_COMPLETE = "section1_complete"
    SECTION2_COMPLETE = "section2_complete"
    VERIFIED = "verified"
    REVERIFICATION_NEEDED = "reverification_needed"


class EVerifyStatus(str, enum.Enum):
    NOT_SUBMITTED = "not_submitted"
    PENDING = "pending"
    EMPLOYMENT_AUTHORIZED = "employment_authorized"
    TENTATIVE_NONCONFIRMATION = "tentative_nonconfirmation"
    CASE_IN_CONTINUANCE = "case_in_continuance"
    FINAL_NONCONFIRMATION = "final_nonconfirmation"
    CLOSED = "closed"


class EVerifyAgencyResult(str, enum.Enum):
    CONFIRMED = "confirmed"
    TENTATIVE_NONCONFIRMATION = "tentative_nonconfirmation"
    FINAL_NONCONFIRMATION = "final_nonconfirmation"
    NO_SHOW = "no_show"


class I9Record(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "i9_records"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )

    # Section 1: employee information
    section1_completed_date: Mapped[date] = mapped_column(Date, nullable=False)
    citizenship_status: Mapped[str] = mapped_column(String(30), nullable=False)
    alien_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    i94_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    foreign_passport_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    foreign_passport_country: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    work_authorization_expires: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)

    # Section 2: employer review of documents
    section2_completed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    section2_completed_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    list_a_document_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    list_a_document_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    list_a_expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    list_b_document_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    list_b_document_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    list_b_expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    list_c_document_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    list_c_document_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    list_c_expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    employment_start_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Section 3: reverification and rehire
    section3_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    section3_new_document_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    section3_new_document_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    section3_new_document_expiration: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    section3_rehire_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(
        String(30), default=I9Status.NOT_STARTED.value, nullable=False, index=True
    )
    everify_case_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    retention_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)


class EVerifyCase(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "everify_cases"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    i9_record_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("i9_records.id"), nullable=True
    )
    case_number: Mapped[str] = mapped_column(String(50), nullable=False)
    submitted_date: Mapped[date] = mapped_column(Date, nullable=False)
    submitted_by: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(30), default=EVerifyStatus.PENDING.value, nullable=False, index=True
    )
    last_status_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    closed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Tentative nonconfirmation handling
    tnc_deadline: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    tnc_contested: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    photo_matched: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    ssa_result: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    dhs_result: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
