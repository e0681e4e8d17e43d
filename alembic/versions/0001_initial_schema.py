"""Initial schema, plus row-level security on PostgreSQL.

Revision ID: 0001
Revises:
Create Date: 2026-02-09 06:00:00
"""
from typing import Sequence, Union

from alembic import op

import groundwork.domain  # noqa: F401
from groundwork.core.tenancy import RLS_SETTING
from groundwork.db.base import Base

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# The tenants table itself is not tenant-scoped
_TENANT_TABLES = [t.name for t in Base.metadata.sorted_tables if "tenant_id" in t.c]


def upgrade() -> None:
    bind = op.get_bind()
    # Baseline: the schema as the models define it at this revision
    Base.metadata.create_all(bind=bind)

    if bind.dialect.name != "postgresql":
        return
    for table in _TENANT_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY tenant_isolation ON {table} "
            f"USING (tenant_id = current_setting('{RLS_SETTING}', true)) "
            f"WITH CHECK (tenant_id = current_setting('{RLS_SETTING}', true))"
        )


def downgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for table in _TENANT_TABLES:
            op.execute(f"DROP POLICY IF EXISTS tenant_isolation ON {table}")
            op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
    Base.metadata.drop_all(bind=bind)
