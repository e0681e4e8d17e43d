"""Employment eligibility schemas: Form I-9 records and E-Verify cases."""


from datetime import date, datetime

from pydantic import Field, model_validator

from groundwork.domain.compliance import (
    CitizenshipStatus,
    EVerifyAgencyResult,
    EVerifyStatus,
    I9Status,
)
from groundwork.schemas.common import CamelModel

REVERIFICATION_WINDOW_DAYS = 90


# ---------------------------------------------------------------------------
# I-9 records
# ---------------------------------------------------------------------------

class _Section2Fields(CamelModel):
    section2_completed_date: date | None = None
    section2_completed_by: str | None = Field(default=None, max_length=200)
    list_a_document_type: str | None = Field(default=None, max_length=100)
    list_a_document_number: str | None = Field(default=None, max_length=50)
    list_a_expiration_date: date | None = None
    list_b_document_type: str | None = Field(default=None, max_length=100)
    list_b_document_number: str | None = Field(default=None, max_length=50)
    list_b_expiration_date: date | None = None
    list_c_document_type: str | None = Field(default=None, max_length=100)
    list_c_document_number: str | None = Field(default=None, max_length=50)
    list_c_expiration_date: date | None = None


class I9RecordCreate(CamelModel):
    employee_id: str
    section1_completed_date: date
    citizenship_status: CitizenshipStatus
    alien_number: str | None = Field(default=None, max_length=20)
    i94_number: str | None = Field(default=None, max_length=20)
    foreign_passport_number: str | None = Field(default=None, max_length=30)
    foreign_passport_country: str | None = Field(default=None, max_length=50)
    work_authorization_expires: date | None = None
    employment_start_date: date
    notes: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _status_documents(self):
        if self.citizenship_status == CitizenshipStatus.PERMANENT_RESIDENT.value and not self.alien_number:
            raise ValueError("alienNumber is required for permanent residents")
        if self.citizenship_status == CitizenshipStatus.AUTHORIZED_ALIEN.value and not self.work_authorization_expires:
            raise ValueError("workAuthorizationExpires is required for authorized aliens")
        return self


class I9RecordUpdate(_Section2Fields):
    work_authorization_expires: date | None = None
    section3_date: date | None = None
    section3_new_document_type: str | None = Field(default=None, max_length=100)
    section3_new_document_number: str | None = Field(default=None, max_length=50)
    section3_new_document_expiration: date | None = None
    section3_rehire_date: date | None = None
    status: I9Status | None = None
    everify_case_number: str | None = Field(default=None, max_length=50)
    retention_end_date: date | None = None
    notes: str | None = Field(default=None, max_length=500)


class I9RecordOut(_Section2Fields):
    id: str
    employee_id: str
    section1_completed_date: date
    citizenship_status: CitizenshipStatus
    alien_number: str | None = None
    i94_number: str | None = None
    foreign_passport_number: str | None = None
    foreign_passport_country: str | None = None
    work_authorization_expires: date | None = None
    employment_start_date: date
    section3_date: date | None = None
    section3_new_document_type: str | None = None
    section3_new_document_number: str | None = None
    section3_new_document_expiration: date | None = None
    section3_rehire_date: date | None = None
    status: I9Status
    everify_case_number: str | None = None
    retention_end_date: date | None = None
    notes: str | None = None
    needs_reverification: bool = False
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def _reverification(self):
        expires = self.work_authorization_expires
        if expires is not None:
            self.needs_reverification = (expires - date.today()).days <= REVERIFICATION_WINDOW_DAYS
        return self


# ---------------------------------------------------------------------------
# E-Verify cases
# ---------------------------------------------------------------------------

class EVerifyCaseCreate(CamelModel):
    employee_id: str
    i9_record_id: str | None = None
    case_number: str = Field(min_length=1, max_length=50)
    submitted_date: date = Field(default_factory=date.today)
    submitted_by: str = Field(min_length=1, max_length=200)
    notes: str | None = Field(default=None, max_length=500)


class EVerifyCaseUpdate(CamelModel):
    status: EVerifyStatus | None = None
    last_status_date: date | None = None
    closed_date: date | None = None
    tnc_deadline: date | None = None
    tnc_contested: bool | None = None
    photo_matched: bool | None = None
    ssa_result: EVerifyAgencyResult | None = None
    dhs_result: EVerifyAgencyResult | None = None
    notes: str | None = Field(default=None, max_length=500)


class EVerifyCaseOut(CamelModel):
    id: str
    employee_id: str
    i9_record_id: str | None = None
    case_number: str
    submitted_date: date
    submitted_by: str
    status: EVerifyStatus
    last_status_date: date | None = None
    closed_date: date | None = None
    tnc_deadline: date | None = None
    tnc_contested: bool | None = None
    photo_matched: bool | None = None
    ssa_result: EVerifyAgencyResult | None = None
    dhs_result: EVerifyAgencyResult | None = None
    notes: str | None = None
    needs_action: bool = False
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def _action(self):
        self.needs_action = (
            self.status == EVerifyStatus.TENTATIVE_NONCONFIRMATION.value
            and self.tnc_deadline is not None
            and self.tnc_deadline >= date.today()
        )
        return self
