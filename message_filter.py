# message_filter.py
"""Decides which inbound chat messages the relay reacts to."""

from __future__ import annotations

import logging

from models import BotIdentity, InboundMessage

BOT_MESSAGE_SUBTYPE = "bot_message"

logger = logging.getLogger(__name__)


def should_process(message: InboundMessage, identity: BotIdentity) -> bool:
    if message.author_username == identity.display_name:
        logger.debug("ignore_own_message", extra={"channel": message.channel_id})
        return False
    if message.subtype == BOT_MESSAGE_SUBTYPE:
        logger.debug(
            "ignore_bot_message",
            extra={"channel": message.channel_id, "author": message.author_username},
        )
        return False
    return True
