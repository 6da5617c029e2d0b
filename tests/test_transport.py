# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_idp

import os
from unittest.mock import patch

import pytest

from coreason_idp.config import EXTRA_IDP_RESPONSE, CoreasonIdpConfig
from coreason_idp.envelope import ResponseEnvelope, ResponseEnvelopeBuilder
from coreason_idp.error_codes import ErrorCode
from coreason_idp.exceptions import EnvelopeDecodeError, MissingTransportSlotError, SignInError
from coreason_idp.models import AuthCredentialRef, IdentityRecord
from coreason_idp.transport import error_transport_for, from_transport, to_transport


def test_to_transport_uses_single_slot(google_record: IdentityRecord) -> None:
    envelope = ResponseEnvelopeBuilder(google_record).set_token("tok").build()
    container = to_transport(envelope)
    assert list(container) == [EXTRA_IDP_RESPONSE]


def test_transport_round_trip(google_record: IdentityRecord, credential: AuthCredentialRef) -> None:
    for envelope in (
        ResponseEnvelopeBuilder(google_record).set_token("tok").build(),
        ResponseEnvelope.from_pending_credential(credential),
        ResponseEnvelope.from_error(TimeoutError("slow")),
    ):
        restored = from_transport(to_transport(envelope))
        assert restored == envelope


def test_from_transport_without_container() -> None:
    assert from_transport(None) is None


def test_from_transport_without_slot_returns_none(log_messages: list[str]) -> None:
    assert from_transport({"other": 1}) is None
    assert any("treating as no result" in m for m in log_messages)


def test_from_transport_without_slot_can_be_required() -> None:
    config = CoreasonIdpConfig(require_transport_slot=True)
    with pytest.raises(MissingTransportSlotError):
        from_transport({}, config)


def test_from_transport_rejects_malformed_slot() -> None:
    with pytest.raises(EnvelopeDecodeError):
        from_transport({EXTRA_IDP_RESPONSE: ["garbage"]})


def test_custom_transport_key(google_record: IdentityRecord) -> None:
    config = CoreasonIdpConfig(transport_key="com.example.RESULT")
    envelope = ResponseEnvelopeBuilder(google_record).set_token("tok").build()

    container = to_transport(envelope, config)
    assert "com.example.RESULT" in container
    assert from_transport(container, config) == envelope
    assert from_transport(container) is None


def test_transport_key_from_environment(google_record: IdentityRecord) -> None:
    envelope = ResponseEnvelopeBuilder(google_record).set_token("tok").build()
    with patch.dict(os.environ, {"COREASON_IDP_TRANSPORT_KEY": "env-slot"}):
        container = to_transport(envelope)
        assert list(container) == ["env-slot"]
        assert from_transport(container) == envelope


def test_error_transport_for_generic_exception() -> None:
    cause = PermissionError("denied")
    restored = from_transport(error_transport_for(cause))

    assert restored is not None
    assert restored.is_successful is False
    assert restored.error is not None
    assert restored.error.code is ErrorCode.UNKNOWN_ERROR
    assert restored == ResponseEnvelope.from_error(cause)


def test_error_transport_for_sign_in_error() -> None:
    err = SignInError(ErrorCode.EMAIL_MISMATCH_ERROR)
    restored = from_transport(error_transport_for(err))
    assert restored is not None
    assert restored.error == err
