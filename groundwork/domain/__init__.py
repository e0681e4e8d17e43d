"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  tenant.py        — Tenants (the isolation boundary itself, not tenant-scoped) and company settings
  project.py       — Projects
  bid.py           — Bids and bid line items
  contracts.py     — Subcontracts, change orders, payment applications
  hr.py            — Employees, employment episodes, certifications, pay rates,
                     withholding elections, union memberships, deductions, emergency contacts
  compliance.py    — Form I-9 records and E-Verify cases
  cost_code.py     — Job cost codes
  time_tracking.py — Project assignments and time entries
  payroll.py       — Pay periods, payroll batches, payroll entries and their deduction lines
  rfi.py           — Requests for Information
  audit.py         — Immutable audit trail (never updated or deleted)
  mixins.py        — Shared IdMixin, TimestampMixin, TenantMixin
"""

from groundwork.domain.audit import AuditTrail
from groundwork.domain.bid import Bid, BidItem
from groundwork.domain.compliance import EVerifyCase, I9Record
from groundwork.domain.contracts import ChangeOrder, PaymentApplication, Subcontract
from groundwork.domain.cost_code import CostCode
from groundwork.domain.hr import (
    Certification,
    Deduction,
    EmergencyContact,
    Employee,
    EmploymentEpisode,
    PayRate,
    UnionMembership,
    WithholdingElection,
)
from groundwork.domain.payroll import PayPeriod, PayrollBatch, PayrollDeductionLine, PayrollEntry
from groundwork.domain.project import Project
from groundwork.domain.rfi import Rfi
from groundwork.domain.tenant import CompanySettings, Tenant
from groundwork.domain.time_tracking import ProjectAssignment, TimeEntry

__all__ = [
    "AuditTrail",
    "Bid",
    "BidItem",
    "Certification",
    "ChangeOrder",
    "CompanySettings",
    "CostCode",
    "Deduction",
    "EVerifyCase",
    "EmergencyContact",
    "Employee",
    "EmploymentEpisode",
    "I9Record",
    "PayPeriod",
    "PayRate",
    "PaymentApplication",
    "PayrollBatch",
    "PayrollDeductionLine",
    "PayrollEntry",
    "Project",
    "ProjectAssignment",
    "Rfi",
    "Subcontract",
    "Tenant",
    "TimeEntry",
    "UnionMembership",
    "WithholdingElection",
]
