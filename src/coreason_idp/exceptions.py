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
Custom exceptions for the coreason-idp package.
"""

from typing import Any

from coreason_idp.error_codes import ErrorCode, friendly_message

# Number of cause links compared for equality. The wire never keeps fewer.
MAX_SIGNATURE_DEPTH = 16

CauseSignature = tuple[str, str, Any] | None


class CoreasonIdpError(Exception):
    """Base exception for all coreason-idp errors."""


class InvalidStateError(CoreasonIdpError):
    """
    Raised when the envelope API is misused by the caller.
    These are programmer errors and are never wrapped into an envelope.
    """


class UnknownProviderError(InvalidStateError):
    """Raised when a record names a provider outside the supported set."""


class MissingTokenError(InvalidStateError):
    """Raised when a social provider record is built without an IdP token."""


class MissingSecretError(InvalidStateError):
    """Raised when a Twitter record is built without a token secret."""


class MissingSourceError(InvalidStateError):
    """Raised when a builder has neither a record nor a pending credential."""


class UnsuccessfulResponseError(InvalidStateError):
    """Raised when a success-only field is read from a failed sign-in envelope."""


class EnvelopeDecodeError(CoreasonIdpError):
    """Raised when data handed to the decoder does not describe a valid envelope."""


class MissingTransportSlotError(EnvelopeDecodeError):
    """Raised when a transport container lacks the envelope slot and the slot is required."""


class SignInError(CoreasonIdpError):
    """
    Tagged failure of a sign-in attempt, carried inside a failed `ResponseEnvelope`.

    The code, message and cause are read-only. Equality is structural so that an error
    survives a trip through the codec and still compares equal to the original.

    Attributes:
        code (ErrorCode): The taxonomy code.
        message (str): Human-readable description. Defaults to the code's friendly message.
        cause (BaseException | None): The wrapped provider failure, if any.
    """

    def __init__(self, code: ErrorCode, message: str | None = None, cause: BaseException | None = None) -> None:
        code = ErrorCode(code)
        text = message if message is not None else friendly_message(code)
        super().__init__(text)
        self._code = code
        self._message = text
        self._cause = cause
        self.__cause__ = cause

    @property
    def code(self) -> ErrorCode:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    def signature(self) -> tuple[ErrorCode, str, CauseSignature]:
        """The structural identity of this error used for equality and hashing."""
        return (self._code, self._message, cause_signature(self._cause))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignInError):
            return NotImplemented
        return self.signature() == other.signature()

    def __hash__(self) -> int:
        return hash(self.signature())

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self._code, self._message, self._cause))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self._code.name}, message={self._message!r}, cause={self._cause!r})"


class SerializedCause(CoreasonIdpError):
    """
    A cause exception reconstructed from its wire form.

    Keeps the qualified type name of the exception it was encoded from, so its
    cause signature matches the original.
    """

    def __init__(self, type_name: str, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self.type_name, self.message, self.cause))

    def __repr__(self) -> str:
        return f"SerializedCause(type_name={self.type_name!r}, message={self.message!r})"


def exception_type_name(exc: BaseException) -> str:
    """
    Returns the fully qualified type name of an exception.
    A `SerializedCause` reports the type it was decoded from.
    """
    if isinstance(exc, SerializedCause):
        return exc.type_name
    cls = type(exc)
    return f"{cls.__module__}.{cls.__qualname__}"


def nested_cause(exc: BaseException) -> BaseException | None:
    """Returns the next exception in the cause chain."""
    if isinstance(exc, (SignInError, SerializedCause)):
        return exc.cause
    return exc.__cause__


def cause_signature(exc: BaseException | None, depth: int = MAX_SIGNATURE_DEPTH) -> CauseSignature:
    """
    Builds a hashable `(type name, message, nested signature)` description of a cause chain.

    Args:
        exc: The head of the chain, or None.
        depth: Maximum number of links to describe.

    Returns:
        The nested signature tuple, or None for an empty chain.
    """
    if exc is None or depth <= 0:
        return None
    return (exception_type_name(exc), str(exc), cause_signature(nested_cause(exc), depth - 1))
