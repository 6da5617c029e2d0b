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
The identity provider response envelope and its builder.
"""

import copy
import warnings
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from coreason_idp.error_codes import RESULT_OK, ErrorCode
from coreason_idp.exceptions import (
    MissingSecretError,
    MissingSourceError,
    MissingTokenError,
    SignInError,
    UnknownProviderError,
    UnsuccessfulResponseError,
    exception_type_name,
)
from coreason_idp.models import AuthCredentialRef, IdentityRecord
from coreason_idp.providers import is_social, is_supported, requires_secret
from coreason_idp.utils.logger import logger


def _check_success_rules(record: IdentityRecord, token: str | None, secret: str | None) -> None:
    """
    Applies the provider rules every successful envelope must satisfy.

    Raises:
        UnknownProviderError: If the record's provider is not supported.
        MissingTokenError: If a social provider record has no token.
        MissingSecretError: If a Twitter record has no secret.
    """
    provider_id = record.provider_id
    if not is_supported(provider_id):
        logger.warning(f"Response build rejected: unknown provider {provider_id!r}")
        raise UnknownProviderError(f"Unknown provider: {provider_id}")

    if is_social(provider_id) and not token:
        logger.warning(f"Response build rejected: missing token for provider {provider_id}")
        raise MissingTokenError("Token cannot be empty when using a non-email provider.")

    if requires_secret(provider_id) and not secret:
        logger.warning(f"Response build rejected: missing secret for provider {provider_id}")
        raise MissingSecretError("Secret cannot be empty when using the Twitter provider.")


class ResponseEnvelope(BaseModel):
    """
    Outcome of a single sign-in attempt through an identity provider.

    An envelope is either successful (it holds the signed-in `record` and any IdP
    token/secret) or failed (it holds a `SignInError`, and for an anonymous-upgrade
    merge conflict the `pending_credential` to apply after linking). The two shapes
    are enforced on construction and the model is frozen afterwards.

    Equality and hashing cover the record, token, secret and error. The pending
    credential is not part of equality.

    Use `ResponseEnvelopeBuilder` for successful envelopes and the `from_error` /
    `from_pending_credential` factories for failed ones.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    record: IdentityRecord | None = Field(default=None, description="The signed-in identity. Success only.")
    idp_token: str | None = Field(default=None, description="Token returned by the IdP. Success only.")
    idp_secret: str | None = Field(default=None, description="Token secret returned by OAuth1 IdPs. Success only.")
    pending_credential: AuthCredentialRef | None = Field(
        default=None, description="Credential to apply after resolving a merge conflict. Failure only."
    )
    error: SignInError | None = Field(default=None, description="Why the sign-in failed. Failure only.")

    @model_validator(mode="after")
    def check_shape(self) -> "ResponseEnvelope":
        """
        Enforces that the envelope is exactly one of the success or failure shapes,
        and that a success satisfies the provider rules.

        Shape violations surface as `ValidationError`. Provider rule violations raise
        the matching `InvalidStateError` subclass.
        """
        if (self.record is None) == (self.error is None):
            raise ValueError("An envelope must carry exactly one of a record or an error.")
        if self.record is not None:
            _check_success_rules(self.record, self.idp_token, self.idp_secret)
        if self.error is not None and (self.idp_token is not None or self.idp_secret is not None):
            raise ValueError("A failed sign-in cannot carry an IdP token or secret.")
        if self.pending_credential is not None and (
            self.error is None or self.error.code != ErrorCode.ANONYMOUS_UPGRADE_MERGE_CONFLICT
        ):
            raise ValueError("A pending credential is only valid on an anonymous upgrade merge conflict.")
        return self

    @classmethod
    def from_error(cls, error: Exception) -> "ResponseEnvelope":
        """
        Wraps a failure caught from a provider call into a failed envelope.

        Args:
            error: The caught exception. A `SignInError` is kept as-is; anything else
                becomes the cause of a new `UNKNOWN_ERROR`.

        Returns:
            ResponseEnvelope: A failed envelope without a pending credential.
        """
        if isinstance(error, SignInError):
            return cls(error=error)

        logger.debug(f"Wrapping {exception_type_name(error)} as {ErrorCode.UNKNOWN_ERROR.name}")
        return cls(error=SignInError(ErrorCode.UNKNOWN_ERROR, cause=error))

    @classmethod
    def from_pending_credential(cls, credential: AuthCredentialRef) -> "ResponseEnvelope":
        """
        Builds the failed envelope for a sign-in that collides with an anonymous session.

        Args:
            credential: The provider credential to retain for account linking.

        Returns:
            ResponseEnvelope: A failed envelope with code `ANONYMOUS_UPGRADE_MERGE_CONFLICT`.
        """
        return cls(
            pending_credential=credential,
            error=SignInError(ErrorCode.ANONYMOUS_UPGRADE_MERGE_CONFLICT),
        )

    def model_copy(self, *, update: dict[str, Any] | None = None, deep: bool = False) -> Self:
        """
        Returns a copy of the envelope, re-running every construction check.

        Raises:
            ValidationError: If the updated values break the envelope shape.
            InvalidStateError: If the updated values break a provider rule.
        """
        values = {name: getattr(self, name) for name in type(self).model_fields}
        if update:
            values.update(update)
        if deep:
            values = copy.deepcopy(values)
        return type(self)(**values)

    @property
    def is_successful(self) -> bool:
        return self.error is None

    def _require_record(self, field: str) -> IdentityRecord:
        if self.record is None:
            logger.warning(f"Attempted to read '{field}' from a failed sign-in response")
            raise UnsuccessfulResponseError(
                f"'{field}' is only available on a successful response. Check `is_successful` first."
            )
        return self.record

    @property
    def provider_type(self) -> str:
        """The provider used to sign in, e.g. 'google.com'."""
        return self._require_record("provider_type").provider_id

    @property
    def email(self) -> str | None:
        """The email used to sign in."""
        return self._require_record("email").email

    @property
    def phone_number(self) -> str | None:
        """The phone number used to sign in."""
        return self._require_record("phone_number").phone_number

    @property
    def error_code(self) -> int:
        """
        Integer code of a failed sign-in, or `RESULT_OK` for a successful one.

        Deprecated: use `error` instead.
        """
        warnings.warn("`error_code` is deprecated, use `error` instead.", DeprecationWarning, stacklevel=2)
        if self.error is None:
            return RESULT_OK
        return int(self.error.code)

    def _identity(self) -> tuple[Any, ...]:
        return (self.record, self.idp_token, self.idp_secret, self.error)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResponseEnvelope):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        # Tokens and secrets MUST be redacted in __repr__
        return (
            f"ResponseEnvelope(record={self.record!r}, "
            f"idp_token={'<REDACTED>' if self.idp_token else None}, "
            f"idp_secret={'<REDACTED>' if self.idp_secret else None}, "
            f"error={self.error!r})"
        )

    def __str__(self) -> str:
        return self.__repr__()


class ResponseEnvelopeBuilder:
    """
    Assembles a `ResponseEnvelope` and validates it in `build()`.

    The builder is seeded with exactly one source: the `IdentityRecord` of a
    successful sign-in, or the `AuthCredentialRef` of a merge conflict. It is not
    thread-safe.

    Example:
        envelope = ResponseEnvelopeBuilder(record).set_token("tok").build()
    """

    def __init__(self, source: IdentityRecord | AuthCredentialRef | None) -> None:
        """
        Initialize the builder.

        Args:
            source: The signed-in record or the pending credential. `None` is accepted
                here and rejected by `build()`.

        Raises:
            TypeError: If the source is neither a record nor a credential.
        """
        if source is not None and not isinstance(source, (IdentityRecord, AuthCredentialRef)):
            raise TypeError(f"Expected IdentityRecord or AuthCredentialRef, got {type(source).__name__}")

        self._record = source if isinstance(source, IdentityRecord) else None
        self._credential = source if isinstance(source, AuthCredentialRef) else None
        self._token: str | None = None
        self._secret: str | None = None

    def set_token(self, token: str | None) -> Self:
        self._token = token
        return self

    def set_secret(self, secret: str | None) -> Self:
        self._secret = secret
        return self

    def build(self) -> ResponseEnvelope:
        """
        Validates the collected values and produces the envelope.

        Returns:
            ResponseEnvelope: A successful envelope for a record source, or the merge
            conflict envelope for a credential source (token and secret are ignored).

        Raises:
            UnknownProviderError: If the record's provider is not supported.
            MissingTokenError: If a social provider record has no token.
            MissingSecretError: If a Twitter record has no secret.
            MissingSourceError: If the builder has no source.
        """
        if self._credential is not None:
            logger.debug(f"Building merge conflict response for provider {self._credential.provider_id}")
            return ResponseEnvelope.from_pending_credential(self._credential)

        if self._record is None:
            logger.warning("Response build attempted without a record or credential")
            raise MissingSourceError("envelope requires a record or credential")

        envelope = ResponseEnvelope(record=self._record, idp_token=self._token, idp_secret=self._secret)
        logger.debug(f"Built successful response for provider {self._record.provider_id}")
        return envelope
