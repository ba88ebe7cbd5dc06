"""Settings module for access control configuration."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AccessControlSettings(BaseSettings):
    """Settings that describe how identity claims are interpreted."""

    model_config = SettingsConfigDict(env_prefix="ACCESS_CONTROL_", case_sensitive=False)

    admin_role: str = Field(
        default="admin",
        description="Role marker that unlocks the audit log view.",
    )
    user_id_claims: list[str] = Field(
        default_factory=lambda: ["userId", "id"],
        description="Claims holding the user id, in order of preference.",
    )
    roles_claim: str = Field(default="roles", description="Claim that contains the user's roles.")
    email_claim: str = Field(default="email", description="Claim that contains the user's email address.")
    name_claim: str = Field(default="name", description="Claim that contains the user's display name.")

    @field_validator("admin_role")
    @classmethod
    def _validate_admin_role(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ACCESS_CONTROL_ADMIN_ROLE must not be empty.")
        return value

    @field_validator("user_id_claims")
    @classmethod
    def _validate_user_id_claims(cls, value: list[str]) -> list[str]:
        claims = [claim.strip() for claim in value if claim and claim.strip()]
        if not claims:
            raise ValueError("ACCESS_CONTROL_USER_ID_CLAIMS must name at least one claim.")
        return claims
