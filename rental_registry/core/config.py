from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Authoritative store; the default is a private in-memory SQLite database
    database_url: str = Field(default="sqlite://", alias="DATABASE_URL")
    sql_echo: bool = Field(default=False, alias="SQL_ECHO")

    # Identity allowed to return any deposit and to recover custodied funds
    admin_identity: str = Field(default="admin", alias="ADMIN_IDENTITY")

    # Length of one rental day in clock units
    seconds_per_day: int = Field(default=86400, gt=0, alias="SECONDS_PER_DAY")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="standard", alias="LOG_FORMAT")

    @field_validator("admin_identity", mode="before")
    @classmethod
    def strip_admin_identity(cls, v: str) -> str:
        """Reject a blank admin identity, which would lock out fund recovery."""
        if isinstance(v, str):
            v = v.strip()
        if not v:
            raise ValueError("admin_identity must not be empty")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("standard", "json"):
            raise ValueError("log_format must be 'standard' or 'json'")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
