"""Command-line entry point: send one request to the simulated API.

Usage:
    python main.py METHOD PATH [JSON_BODY]

Example:
    python main.py POST /jobs '{"title": "Backend Engineer", "slug": "backend-engineer"}'
    python main.py GET "/jobs?status=active&tags=remote"
"""

import asyncio
import json
import sys

from config import settings
from core.logger import logger, setup_logger
from database.db import Store
from services.request_simulator import RequestSimulator

USAGE = "Usage: python main.py METHOD PATH [JSON_BODY]"


async def run(method: str, path: str, body=None) -> int:
    store = Store(settings.database_path).open()
    try:
        simulator = RequestSimulator(store)
        response = await simulator.request(method, path, body=body)
    finally:
        store.close()
    print(json.dumps(response.to_dict(), indent=2))
    return 0 if response.ok else 1


def main():
    """Main application function."""
    setup_logger(log_level=settings.log_level)

    if len(sys.argv) < 3:
        print(USAGE)
        sys.exit(2)

    method, path = sys.argv[1], sys.argv[2]
    body = None
    if len(sys.argv) > 3:
        try:
            body = json.loads(sys.argv[3])
        except json.JSONDecodeError as e:
            print(f"Invalid JSON body: {e}")
            sys.exit(2)

    try:
        sys.exit(asyncio.run(run(method, path, body)))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
