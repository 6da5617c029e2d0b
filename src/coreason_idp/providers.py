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
Identity provider identifiers recognised by the response envelope.
"""

from enum import StrEnum


class ProviderId(StrEnum):
    GOOGLE = "google.com"
    FACEBOOK = "facebook.com"
    TWITTER = "twitter.com"
    GITHUB = "github.com"
    EMAIL = "password"
    PHONE = "phone"


SUPPORTED_PROVIDERS: frozenset[str] = frozenset(p.value for p in ProviderId)

# Federated providers always hand back an IdP token.
SOCIAL_PROVIDERS: frozenset[str] = frozenset(
    {
        ProviderId.GOOGLE.value,
        ProviderId.FACEBOOK.value,
        ProviderId.TWITTER.value,
        ProviderId.GITHUB.value,
    }
)

# OAuth1 providers additionally hand back a token secret.
SECRET_PROVIDERS: frozenset[str] = frozenset({ProviderId.TWITTER.value})


def is_supported(provider_id: str) -> bool:
    return provider_id in SUPPORTED_PROVIDERS


def is_social(provider_id: str) -> bool:
    return provider_id in SOCIAL_PROVIDERS


def requires_secret(provider_id: str) -> bool:
    return provider_id in SECRET_PROVIDERS
