# main.py
"""Jira relay Slack bot entry point."""

import logging

from dispatcher import Dispatcher
from jira_client import JiraClient
from logging_utils import configure_logging
from settings import RelaySettings
from slack_transport import SlackTransport

logger = logging.getLogger(__name__)


def build_dispatcher(settings: RelaySettings, transport: SlackTransport) -> Dispatcher:
    return Dispatcher(
        identity=settings.identity,
        transport=transport,
        tracker=JiraClient(settings.jira),
        tracker_base_url=settings.jira.base_url,
    )


def main() -> None:
    settings = RelaySettings.load()
    configure_logging(settings.logging.level, settings.logging.json_enabled)

    transport = SlackTransport(settings.slack)
    dispatcher = build_dispatcher(settings, transport)

    if not transport.start():
        # The queued auth failure is logged by the dispatcher before it stops.
        transport.close()

    try:
        dispatcher.run(transport.events())
    except KeyboardInterrupt:
        logger.info("shutdown_requested")
    finally:
        transport.close()


if __name__ == "__main__":
    main()
