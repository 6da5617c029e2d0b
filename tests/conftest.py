# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_idp

from collections.abc import Generator

import pytest
from loguru import logger
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import Tracer
from pydantic import SecretStr

from coreason_idp.models import AuthCredentialRef, IdentityRecord


@pytest.fixture
def google_record() -> IdentityRecord:
    return IdentityRecord(provider_id="google.com", email="a@b.com", display_name="Alice")


@pytest.fixture
def twitter_record() -> IdentityRecord:
    return IdentityRecord(provider_id="twitter.com", display_name="alice_tw")


@pytest.fixture
def email_record() -> IdentityRecord:
    return IdentityRecord(provider_id="password", email="alice@example.com")


@pytest.fixture
def phone_record() -> IdentityRecord:
    return IdentityRecord(provider_id="phone", phone_number="+15555550100")


@pytest.fixture
def credential() -> AuthCredentialRef:
    return AuthCredentialRef(
        provider_id="google.com",
        sign_in_method="google.com",
        id_token=SecretStr("id-token-value"),
        access_token=SecretStr("access-token-value"),
    )


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Captures Loguru output as plain message strings."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def telemetry_setup() -> tuple[InMemorySpanExporter, Tracer]:
    """Sets up an OpenTelemetry tracer with an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return exporter, provider.get_tracer("test_tracer")
