# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_idp

"""
Records handed to the envelope by identity provider collaborators.
"""

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_serializer


class IdentityRecord(BaseModel):
    """
    The identity a provider signed in, as reported by the collaborator.

    This model is frozen (immutable); the envelope only ever reads it.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "provider_id": "google.com",
                "email": "alice@coreason.ai",
                "phone_number": None,
                "display_name": "Alice",
                "photo_uri": None,
            }
        },
    )

    provider_id: str = Field(
        ...,
        description="Identifier of the provider used to sign in (e.g. 'google.com', 'password', 'phone').",
        examples=["google.com"],
    )
    email: str | None = Field(default=None, description="Email address used to sign in, kept as received.")
    phone_number: str | None = Field(default=None, description="Phone number used to sign in.")
    display_name: str | None = Field(default=None, description="Display name reported by the provider.")
    photo_uri: str | None = Field(default=None, description="Profile photo URI reported by the provider.")

    def __repr__(self) -> str:
        # PII fields MUST be redacted in __repr__
        return (
            f"IdentityRecord(provider_id={self.provider_id!r}, "
            f"email={'<REDACTED>' if self.email else None}, "
            f"phone_number={'<REDACTED>' if self.phone_number else None}, "
            f"display_name={'<REDACTED>' if self.display_name else None})"
        )

    def __str__(self) -> str:
        return self.__repr__()


class AuthCredentialRef(BaseModel):
    """
    Opaque handle to a provider credential kept across an anonymous-upgrade merge conflict.

    Secret material is masked in repr and logs. The JSON dump carries the raw values
    so the credential can be applied after the accounts are linked.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider_id: str = Field(..., description="Provider that issued the credential.")
    sign_in_method: str = Field(..., description="Sign-in method of the credential (e.g. 'google.com', 'password').")
    id_token: SecretStr | None = None
    access_token: SecretStr | None = None
    secret: SecretStr | None = None

    @field_serializer("id_token", "access_token", "secret", when_used="json")
    def _reveal_for_wire(self, value: SecretStr | None) -> str | None:
        return value.get_secret_value() if value is not None else None
