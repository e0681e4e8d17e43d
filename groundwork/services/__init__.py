"""Services package — all business logic lives here, never in routers.

Pure calculators (no database access):
  labor_cost.py    — wages by hour type plus burden
  vista_export.py  — Vista/Viewpoint timesheet CSV
  payroll.py       — calculate_pay(), alongside the payroll services

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
