"""v1 router package — all /api/v1/* endpoints live here.

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to groundwork/services/.
"""

from groundwork.routers.v1.audit_logs import router as audit_logs_router
from groundwork.routers.v1.bids import router as bids_router
from groundwork.routers.v1.certifications import router as certifications_router
from groundwork.routers.v1.change_orders import router as change_orders_router
from groundwork.routers.v1.company_settings import router as company_settings_router
from groundwork.routers.v1.cost_codes import router as cost_codes_router
from groundwork.routers.v1.dashboard import router as dashboard_router
from groundwork.routers.v1.deductions import router as deductions_router
from groundwork.routers.v1.emergency_contacts import router as emergency_contacts_router
from groundwork.routers.v1.employees import router as employees_router
from groundwork.routers.v1.employment_episodes import router as employment_episodes_router
from groundwork.routers.v1.everify_cases import router as everify_cases_router
from groundwork.routers.v1.i9_records import router as i9_records_router
from groundwork.routers.v1.pay_periods import router as pay_periods_router
from groundwork.routers.v1.pay_rates import router as pay_rates_router
from groundwork.routers.v1.payment_applications import router as payment_applications_router
from groundwork.routers.v1.payroll_batches import router as payroll_batches_router
from groundwork.routers.v1.project_assignments import router as project_assignments_router
from groundwork.routers.v1.projects import router as projects_router
from groundwork.routers.v1.rfis import router as rfis_router
from groundwork.routers.v1.subcontracts import router as subcontracts_router
from groundwork.routers.v1.tenants import router as tenants_router
from groundwork.routers.v1.time_entries import router as time_entries_router
from groundwork.routers.v1.union_memberships import router as union_memberships_router
from groundwork.routers.v1.withholding_elections import router as withholding_elections_router

api_routers = [
    tenants_router,
    company_settings_router,
    dashboard_router,
    projects_router,
    rfis_router,
    bids_router,
    subcontracts_router,
    change_orders_router,
    payment_applications_router,
    employees_router,
    certifications_router,
    pay_rates_router,
    employment_episodes_router,
    withholding_elections_router,
    union_memberships_router,
    deductions_router,
    emergency_contacts_router,
    i9_records_router,
    everify_cases_router,
    cost_codes_router,
    project_assignments_router,
    time_entries_router,
    pay_periods_router,
    payroll_batches_router,
    audit_logs_router,
]
