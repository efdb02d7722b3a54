"""Protean Engine runner for the preorders domain.

In production, event processing is asynchronous: the Engine relays
CartUpdated from the outbox and invokes the follow-up email handler.

Usage:
    python src/server.py
    python src/server.py --test-mode   # drain pending messages, then exit
"""

import argparse
import asyncio

from protean.server.engine import Engine


def _get_domain():
    from preorders.domain import preorders

    preorders.init()
    return preorders


async def run(test_mode: bool = False):
    engine = Engine(_get_domain(), test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Preorders Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
