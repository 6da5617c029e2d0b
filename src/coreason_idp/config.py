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
Configuration for the coreason-idp package.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coreason_idp.exceptions import MAX_SIGNATURE_DEPTH

EXTRA_IDP_RESPONSE = "extra_idp_response"

# Never below the depth compared by SignInError equality, so a truncated chain still round-trips.
DEFAULT_MAX_CAUSE_DEPTH = MAX_SIGNATURE_DEPTH


class CoreasonIdpConfig(BaseSettings):
    """
    Configuration settings for the envelope transport boundary.

    Attributes:
        transport_key (str): Name of the container slot holding the encoded envelope.
        require_transport_slot (bool): Raise instead of returning None when a container lacks the slot.
        max_cause_depth (int): Longest error cause chain carried across the wire. At least 16.
    """

    model_config = SettingsConfigDict(
        env_prefix="COREASON_IDP_",
        case_sensitive=False,
    )

    transport_key: str = EXTRA_IDP_RESPONSE
    require_transport_slot: bool = False
    max_cause_depth: int = Field(default=DEFAULT_MAX_CAUSE_DEPTH, ge=DEFAULT_MAX_CAUSE_DEPTH, le=64)

    @field_validator("transport_key")
    @classmethod
    def validate_transport_key(cls, v: str) -> str:
        """
        Strips the slot name and rejects blank names.

        Args:
            v: The configured slot name.

        Returns:
            The stripped slot name.

        Raises:
            ValueError: If the name is empty after stripping.
        """
        v = v.strip()
        if not v:
            raise ValueError("transport_key must not be empty")
        return v


class LoggingConfig(BaseSettings):
    """
    Logging settings, read from `COREASON_IDP_LOG_*` environment variables.

    Attributes:
        level (str): Minimum log level. Unknown levels fall back to INFO.
        serialize (bool): Emit JSON to stdout instead of human-readable text to stderr.
        file (str | None): Optional path of a rotating JSON log file.
    """

    model_config = SettingsConfigDict(
        env_prefix="COREASON_IDP_LOG_",
        case_sensitive=False,
    )

    level: str = "INFO"
    serialize: bool = False
    file: str | None = None

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"
