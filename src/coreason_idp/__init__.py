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
Immutable response envelope for sign-in attempts through third-party identity providers.
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .codec import decode, dumps, encode, loads
from .config import EXTRA_IDP_RESPONSE, CoreasonIdpConfig
from .envelope import ResponseEnvelope, ResponseEnvelopeBuilder
from .error_codes import RESULT_OK, ErrorCode
from .exceptions import (
    CoreasonIdpError,
    EnvelopeDecodeError,
    InvalidStateError,
    SignInError,
    UnsuccessfulResponseError,
)
from .models import AuthCredentialRef, IdentityRecord
from .providers import ProviderId
from .transport import error_transport_for, from_transport, to_transport

__all__ = [
    "EXTRA_IDP_RESPONSE",
    "RESULT_OK",
    "AuthCredentialRef",
    "CoreasonIdpConfig",
    "CoreasonIdpError",
    "EnvelopeDecodeError",
    "ErrorCode",
    "IdentityRecord",
    "InvalidStateError",
    "ProviderId",
    "ResponseEnvelope",
    "ResponseEnvelopeBuilder",
    "SignInError",
    "UnsuccessfulResponseError",
    "decode",
    "dumps",
    "encode",
    "error_transport_for",
    "from_transport",
    "loads",
    "to_transport",
]
