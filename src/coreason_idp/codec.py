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
Wire codec for `ResponseEnvelope`.

An envelope is encoded as the ordered tuple
`(record, token, secret, pending_credential, error)` of JSON-compatible values.
Decoding validates the tuple and rebuilds the envelope through its own shape
checks, so malformed data is rejected rather than normalized.
"""

from collections.abc import Callable, Sequence
from typing import Any, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from coreason_idp.config import DEFAULT_MAX_CAUSE_DEPTH
from coreason_idp.envelope import ResponseEnvelope
from coreason_idp.error_codes import ErrorCode
from coreason_idp.exceptions import (
    EnvelopeDecodeError,
    InvalidStateError,
    SerializedCause,
    SignInError,
    exception_type_name,
    nested_cause,
)
from coreason_idp.models import AuthCredentialRef, IdentityRecord
from coreason_idp.utils.logger import logger

tracer = trace.get_tracer(__name__)


class CauseFrame(BaseModel):
    """Wire form of one link in an error's cause chain."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type_name: str
    message: str
    cause: Optional["CauseFrame"] = None


class ErrorFrame(BaseModel):
    """Wire form of a `SignInError`."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: ErrorCode
    message: str
    cause: CauseFrame | None = None


EnvelopeWire = tuple[
    IdentityRecord | None,
    str | None,
    str | None,
    AuthCredentialRef | None,
    ErrorFrame | None,
]

_WIRE: TypeAdapter[EnvelopeWire] = TypeAdapter(EnvelopeWire)


def _freeze_cause(exc: BaseException | None, remaining: int) -> CauseFrame | None:
    if exc is None:
        return None
    if remaining <= 0:
        logger.warning(f"Error cause chain too long, dropping {exception_type_name(exc)} and beyond")
        return None
    return CauseFrame(
        type_name=exception_type_name(exc),
        message=str(exc),
        cause=_freeze_cause(nested_cause(exc), remaining - 1),
    )


def _thaw_cause(frame: CauseFrame | None) -> SerializedCause | None:
    if frame is None:
        return None
    return SerializedCause(frame.type_name, frame.message, _thaw_cause(frame.cause))


def _chain_length(frame: CauseFrame | None) -> int:
    length = 0
    while frame is not None:
        length += 1
        frame = frame.cause
    return length


def _check_depth(max_cause_depth: int) -> None:
    if max_cause_depth < DEFAULT_MAX_CAUSE_DEPTH:
        raise ValueError(
            f"max_cause_depth must be at least {DEFAULT_MAX_CAUSE_DEPTH}, the depth compared by error equality"
        )


def _to_wire(envelope: ResponseEnvelope, max_cause_depth: int) -> EnvelopeWire:
    _check_depth(max_cause_depth)
    error_frame = None
    if envelope.error is not None:
        error_frame = ErrorFrame(
            code=envelope.error.code,
            message=envelope.error.message,
            cause=_freeze_cause(envelope.error.cause, max_cause_depth),
        )
    return (
        envelope.record,
        envelope.idp_token,
        envelope.idp_secret,
        envelope.pending_credential,
        error_frame,
    )


def _describe(e: ValidationError) -> str:
    # Input values are left out: they may hold tokens or PII
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in e.errors(include_input=False, include_url=False)
    )


def _annotate(span: Span, envelope: ResponseEnvelope) -> None:
    span.set_attribute("idp.successful", envelope.is_successful)
    if envelope.record is not None:
        span.set_attribute("idp.provider", envelope.record.provider_id)
    elif envelope.error is not None:
        span.set_attribute("idp.error_code", envelope.error.code.name)


def _decode(validate: Callable[[], EnvelopeWire], max_cause_depth: int) -> ResponseEnvelope:
    _check_depth(max_cause_depth)
    with tracer.start_as_current_span("decode_envelope") as span:
        try:
            record, token, secret, credential, error_frame = validate()

            error = None
            if error_frame is not None:
                depth = _chain_length(error_frame.cause)
                if depth > max_cause_depth:
                    raise EnvelopeDecodeError(
                        f"Error cause chain has {depth} links, more than the allowed {max_cause_depth}"
                    )
                error = SignInError(error_frame.code, error_frame.message, _thaw_cause(error_frame.cause))

            envelope = ResponseEnvelope(
                record=record,
                idp_token=token,
                idp_secret=secret,
                pending_credential=credential,
                error=error,
            )
        except ValidationError as e:
            msg = f"Invalid envelope data: {_describe(e)}"
            logger.warning(f"Envelope decode failed with {e.error_count()} validation error(s)")
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, msg))
            raise EnvelopeDecodeError(msg) from e
        except InvalidStateError as e:
            msg = f"Invalid envelope data: {e}"
            logger.warning(f"Envelope decode failed: {e}")
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, msg))
            raise EnvelopeDecodeError(msg) from e
        except EnvelopeDecodeError as e:
            logger.warning(f"Envelope decode failed: {e}")
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise

        _annotate(span, envelope)
        span.set_status(Status(StatusCode.OK))
        return envelope


def encode(envelope: ResponseEnvelope, *, max_cause_depth: int = DEFAULT_MAX_CAUSE_DEPTH) -> tuple[Any, ...]:
    """
    Encodes an envelope into its ordered wire tuple.

    Emits an OpenTelemetry span `encode_envelope`.

    Args:
        envelope: The envelope to encode.
        max_cause_depth: Longest cause chain to carry. Longer chains are truncated.

    Returns:
        tuple: `(record, token, secret, pending_credential, error)` as JSON-compatible values.
    """
    with tracer.start_as_current_span("encode_envelope") as span:
        _annotate(span, envelope)
        return tuple(_WIRE.dump_python(_to_wire(envelope, max_cause_depth), mode="json"))


def decode(data: Sequence[Any], *, max_cause_depth: int = DEFAULT_MAX_CAUSE_DEPTH) -> ResponseEnvelope:
    """
    Rebuilds an envelope from its wire tuple.

    Emits an OpenTelemetry span `decode_envelope`.

    Args:
        data: The five-item sequence produced by `encode`.
        max_cause_depth: Longest cause chain accepted.

    Returns:
        ResponseEnvelope: The decoded envelope.

    Raises:
        EnvelopeDecodeError: If the data is malformed or describes an invalid envelope.
    """
    return _decode(lambda: _WIRE.validate_python(data), max_cause_depth)


def dumps(envelope: ResponseEnvelope, *, max_cause_depth: int = DEFAULT_MAX_CAUSE_DEPTH) -> bytes:
    """Encodes an envelope as a JSON array."""
    with tracer.start_as_current_span("encode_envelope") as span:
        _annotate(span, envelope)
        return _WIRE.dump_json(_to_wire(envelope, max_cause_depth))


def loads(data: str | bytes, *, max_cause_depth: int = DEFAULT_MAX_CAUSE_DEPTH) -> ResponseEnvelope:
    """
    Decodes an envelope from the JSON produced by `dumps`.

    Raises:
        EnvelopeDecodeError: If the JSON is invalid or describes an invalid envelope.
    """
    return _decode(lambda: _WIRE.validate_json(data), max_cause_depth)
