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
Error taxonomy for failed sign-in attempts.
"""

from enum import IntEnum

# Value reported by the deprecated `ResponseEnvelope.error_code` for a successful sign-in.
RESULT_OK = -1


class ErrorCode(IntEnum):
    """
    Closed set of failure codes carried by a `SignInError`.

    The integer values are the wire values and must never be renumbered.
    """

    UNKNOWN_ERROR = 0
    NO_NETWORK = 1
    DEVELOPER_ERROR = 3
    PROVIDER_ERROR = 4
    ANONYMOUS_UPGRADE_MERGE_CONFLICT = 5
    EMAIL_MISMATCH_ERROR = 6


_FRIENDLY_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.UNKNOWN_ERROR: "Unknown error",
    ErrorCode.NO_NETWORK: "No internet connection",
    ErrorCode.DEVELOPER_ERROR: "Developer error",
    ErrorCode.PROVIDER_ERROR: "Provider error",
    ErrorCode.ANONYMOUS_UPGRADE_MERGE_CONFLICT: "User account merge conflict",
    ErrorCode.EMAIL_MISMATCH_ERROR: "You are trying to sign in a second time with a different email",
}


def friendly_message(code: ErrorCode) -> str:
    """
    Returns the default human-readable message for an error code.

    Args:
        code: The error code.

    Returns:
        str: A short description suitable as a default exception message.
    """
    return _FRIENDLY_MESSAGES[code]
