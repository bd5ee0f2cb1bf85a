"""
Gigdesk booking core entry point.

Builds the wired marketplace from environment configuration and either
prints a summary of the seeded catalog or plays the offline console demo.

Usage:
    Summary:      python main.py
    Console mode: python main.py console [--scenario booking|reject|availability]
"""

import logging
import sys

from gigdesk.config import settings

logger = logging.getLogger(__name__)


def _run_summary() -> None:
    """Build the marketplace once and log what was loaded."""
    from gigdesk.container import build_marketplace

    market = build_marketplace()
    freelancers = market.identities.list_freelancers()
    logger.info(
        "%s: %d identities, %d public freelancers",
        settings.marketplace.name, len(market.identities), len(freelancers),
    )
    for freelancer in freelancers:
        services = market.catalog.list_for_freelancer(freelancer.id, active_only=True)
        logger.info(
            "  %s: %s", freelancer.display_name,
            ", ".join(service.title for service in services) or "no active services",
        )
    market.close()


def _run_console_mode() -> None:
    """Start the offline console demo."""
    import console_demo

    sys.argv = [sys.argv[0]] + sys.argv[2:]
    console_demo.main()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    else:
        _run_summary()
