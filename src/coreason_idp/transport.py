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
Transport boundary between the envelope and the UI-flow collaborator.

The collaborator exchanges a plain string-keyed container; the encoded envelope
lives in a single named slot of it.
"""

from collections.abc import Mapping
from typing import Any

from coreason_idp.codec import decode, encode
from coreason_idp.config import CoreasonIdpConfig
from coreason_idp.envelope import ResponseEnvelope
from coreason_idp.exceptions import MissingTransportSlotError
from coreason_idp.utils.logger import logger


def to_transport(envelope: ResponseEnvelope, config: CoreasonIdpConfig | None = None) -> dict[str, Any]:
    """
    Wraps an envelope into a transport container.

    Args:
        envelope: The envelope to hand to the collaborator.
        config: Transport settings. Read from the environment if omitted.

    Returns:
        dict[str, Any]: A container holding the encoded envelope under the configured slot.
    """
    config = config or CoreasonIdpConfig()
    return {config.transport_key: encode(envelope, max_cause_depth=config.max_cause_depth)}


def from_transport(
    container: Mapping[str, Any] | None, config: CoreasonIdpConfig | None = None
) -> ResponseEnvelope | None:
    """
    Extracts the envelope from a container returned by the collaborator.

    A missing container, or a container without the slot, means the flow ended
    without a result (e.g. the user backed out), and yields None. Set
    `require_transport_slot` to treat a missing slot as an error instead.

    Args:
        container: The container the flow finished with, or None.
        config: Transport settings. Read from the environment if omitted.

    Returns:
        ResponseEnvelope | None: The decoded envelope, or None if there is none.

    Raises:
        MissingTransportSlotError: If the slot is absent and `require_transport_slot` is set.
        EnvelopeDecodeError: If the slot holds malformed data.
    """
    if container is None:
        return None

    config = config or CoreasonIdpConfig()
    if config.transport_key not in container:
        if config.require_transport_slot:
            logger.warning(f"Transport container has no '{config.transport_key}' slot")
            raise MissingTransportSlotError(f"Transport container has no '{config.transport_key}' slot")
        logger.debug(f"Transport container has no '{config.transport_key}' slot, treating as no result")
        return None

    return decode(container[config.transport_key], max_cause_depth=config.max_cause_depth)


def error_transport_for(error: Exception, config: CoreasonIdpConfig | None = None) -> dict[str, Any]:
    """
    Builds the transport container for a failure caught from a provider call.

    Args:
        error: The caught exception.
        config: Transport settings. Read from the environment if omitted.

    Returns:
        dict[str, Any]: A container holding the failed envelope.
    """
    return to_transport(ResponseEnvelope.from_error(error), config)
