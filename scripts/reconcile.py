#!/usr/bin/env python3
"""
Reconcile Script.

Runs one reconciliation operation against the configured node and database
and prints the result as JSON. Intended for cron jobs and manual repair.

Usage:
    python scripts/reconcile.py sync     # append the on-chain value on drift
    python scripts/reconcile.py check    # report drift without writing
    python scripts/reconcile.py status   # network, ledger and contract snapshot
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from chainvalue.bootstrap import build_service
from chainvalue.config.database import create_engine, create_session_maker
from chainvalue.config.logging import setup_logging
from chainvalue.config.settings import settings
from chainvalue.utils.exceptions import ChainValueError, is_retryable


async def reconcile(operation: str) -> int:
    """
    Run one operation.

    Returns:
        Process exit code
    """
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    service = build_service(settings, create_session_maker(engine))
    try:
        if operation == "sync":
            result = await service.sync()
        elif operation == "check":
            result = await service.check()
        else:
            result = await service.status()
    except ChainValueError as e:
        logger.error(f"{operation} failed: {e}")
        print(
            json.dumps(
                {"success": False, "error": str(e), "step": e.step, "retryable": is_retryable(e)},
                indent=2,
            )
        )
        return 1
    finally:
        await service.close()
        await engine.dispose()

    print(json.dumps({"success": True, "data": result.to_dict()}, indent=2))
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Reconcile the contract value ledger with the blockchain"
    )
    parser.add_argument(
        "operation",
        choices=["sync", "check", "status"],
        help="Operation to run",
    )
    args = parser.parse_args()

    # Logs go to stderr so stdout stays machine-readable
    setup_logging(settings.log_level, None)
    sys.exit(asyncio.run(reconcile(args.operation)))


if __name__ == "__main__":
    main()
