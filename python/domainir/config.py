"""Settings for bootstrap, compilation and the CLI.

Values come from environment variables prefixed with DOMAINIR_ and, when
present, from a .env file:

    DOMAINIR_STRICT_INVERSE_RELATIONS=false
    DOMAINIR_EXTRA_ROLES='["editor", "viewer"]'
    DOMAINIR_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DomainIRSettings(BaseSettings):
    """Schema compilation settings."""

    model_config = SettingsConfigDict(
        env_prefix="DOMAINIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    strict_inverse_relations: bool = Field(
        default=True,
        description="Treat a missing or inconsistent inverseSide as a compile error",
    )
    admin_role: str = Field(default="admin", description="Role that may bypass ownership filters")
    extra_roles: list[str] = Field(
        default_factory=list,
        description="Roles added to every policy table even if no model names them",
    )
    created_at_field: str = Field(default="createdAt")
    updated_at_field: str = Field(default="updatedAt")
    deleted_at_field: str = Field(default="deletedAt")
    log_level: str = Field(default="INFO", description="Logging level used by the CLI")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def lifecycle_fields(self) -> tuple[str, str, str]:
        return (self.created_at_field, self.updated_at_field, self.deleted_at_field)


@lru_cache
def get_settings() -> DomainIRSettings:
    return DomainIRSettings()


__all__ = ["DomainIRSettings", "get_settings"]
