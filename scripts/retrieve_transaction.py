#!/usr/bin/env python3
"""Fetch a transaction from Pushin Pay and print it as JSON.

Usage: PUSHIN_PAY_TOKEN=... retrieve_transaction.py <transaction_id>
"""
import asyncio
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import structlog

from pushin_pay import PushinPay, PushinPayError
from pushin_pay.config import settings
from pushin_pay.logging import configure_logging


logger = structlog.get_logger()


async def main(transaction_id: str) -> int:
    configure_logging(level=settings.log_level, log_format=settings.log_format, take_over_root=True)

    headers = {"Authorization": f"Bearer {os.environ['PUSHIN_PAY_TOKEN']}"}

    async with PushinPay() as pushin_pay:
        try:
            transaction = await pushin_pay.transactions.retrieve_by_transaction_id_async(headers, transaction_id)
        except PushinPayError as e:
            logger.error("transaction_lookup_failed", transaction_id=transaction_id, error=str(e))
            return 1

    print(transaction.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__.strip().splitlines()[-1], file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))
