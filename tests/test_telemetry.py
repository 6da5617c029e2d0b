# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_idp

from unittest.mock import patch

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode, Tracer

from coreason_idp.codec import decode, dumps, encode
from coreason_idp.envelope import ResponseEnvelope, ResponseEnvelopeBuilder
from coreason_idp.exceptions import EnvelopeDecodeError
from coreason_idp.models import IdentityRecord


def test_encode_emits_span(telemetry_setup: tuple[InMemorySpanExporter, Tracer], google_record: IdentityRecord) -> None:
    exporter, tracer = telemetry_setup
    envelope = ResponseEnvelopeBuilder(google_record).set_token("tok").build()

    with patch("coreason_idp.codec.tracer", tracer):
        encode(envelope)
        dumps(envelope)

    spans = exporter.get_finished_spans()
    assert [s.name for s in spans] == ["encode_envelope", "encode_envelope"]
    assert spans[0].attributes is not None
    assert spans[0].attributes["idp.successful"] is True
    assert spans[0].attributes["idp.provider"] == "google.com"


def test_decode_success_span(telemetry_setup: tuple[InMemorySpanExporter, Tracer]) -> None:
    exporter, tracer = telemetry_setup
    wire = encode(ResponseEnvelope.from_error(ValueError("boom")))

    with patch("coreason_idp.codec.tracer", tracer):
        decode(wire)

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    span = spans[0]
    assert span.name == "decode_envelope"
    assert span.status.status_code == StatusCode.OK
    assert span.attributes is not None
    assert span.attributes["idp.successful"] is False
    assert span.attributes["idp.error_code"] == "UNKNOWN_ERROR"


def test_decode_failure_span(telemetry_setup: tuple[InMemorySpanExporter, Tracer]) -> None:
    exporter, tracer = telemetry_setup

    with patch("coreason_idp.codec.tracer", tracer):
        with pytest.raises(EnvelopeDecodeError):
            decode([None, None, None, None, None])

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    span = spans[0]
    assert span.name == "decode_envelope"
    assert span.status.status_code == StatusCode.ERROR
    assert len(span.events) > 0
    assert span.events[0].name == "exception"


def test_span_attributes_carry_no_secrets(
    telemetry_setup: tuple[InMemorySpanExporter, Tracer], twitter_record: IdentityRecord
) -> None:
    exporter, tracer = telemetry_setup
    envelope = ResponseEnvelopeBuilder(twitter_record).set_token("tok-123").set_secret("sec-456").build()

    with patch("coreason_idp.codec.tracer", tracer):
        decode(encode(envelope))

    for span in exporter.get_finished_spans():
        values = [str(v) for v in (span.attributes or {}).values()]
        assert "tok-123" not in values
        assert "sec-456" not in values
