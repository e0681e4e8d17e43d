from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = Field(default="Groundwork API", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV")
    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")

    # Database (PostgreSQL via asyncpg in production, SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./groundwork_dev.db",
        alias="DATABASE_URL",
    )

    # Multi-tenancy
    default_tenant_id: str | None = Field(default=None, alias="DEFAULT_TENANT_ID")
    tenant_header: str = Field(default="X-Tenant-Id", alias="TENANT_HEADER")

    audit_enabled: bool = Field(default=True, alias="AUDIT_ENABLED")

    # Labor costing
    labor_burden_rate: float = Field(
        default=0.35, alias="LABOR_BURDEN_RATE",
    )  # taxes, insurance and benefits as a fraction of base wages

    # Contracts
    default_retainage_percent: float = Field(
        default=10.0, alias="DEFAULT_RETAINAGE_PERCENT",
    )

    # Payroll withholding (flat rates, applied to gross pay)
    federal_withholding_rate: float = Field(
        default=0.10, alias="FEDERAL_WITHHOLDING_RATE",
    )
    state_withholding_rate: float = Field(
        default=0.0, alias="STATE_WITHHOLDING_RATE",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

settings = Settings()
