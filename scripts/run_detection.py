"""Index end-of-day blocks, then discover distributors up to END_DATE.

Usage:
    PYTHONPATH=src python scripts/run_detection.py 2024-01-31 [2022-07-12]

The optional second date is where block indexing starts (defaults to END_DATE).
Settings come from FEETRACKER_* environment variables or .env.
"""

import asyncio
import logging
import sys
from datetime import date

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


async def main(end_date: date, start_date: date) -> None:
    from feetracker.container import Container

    container = Container()
    settings = container.settings()
    logging.getLogger().setLevel(settings.log_level)

    http = container.http_client()
    try:
        index = await container.block_finder().find_blocks_for_date_range(start_date, end_date)
        print(f"Indexed {len(index['blocks'])} day(s), chain {index['metadata']['chain_id']}")

        registry = await container.detector().detect_distributors(end_date)
        meta = registry["metadata"]
        print(f"Last scanned block: {meta['last_scanned_block']}")
        for address, record in registry["distributors"].items():
            flag = " (reward distributor)" if record["is_reward_distributor"] else ""
            print(f"  {record['date']}  {record['type']:<15} {address}{flag}")
    finally:
        await http.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    end = date.fromisoformat(sys.argv[1])
    start = date.fromisoformat(sys.argv[2]) if len(sys.argv) > 2 else end
    asyncio.run(main(end, start))
