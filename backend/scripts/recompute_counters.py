"""Rebuild the cached brand/mall/district counters on provinces, cities and districts."""

import logging

from sqlalchemy.orm import Session

from mallmap.db import get_engine
from mallmap.services import recompute_counters

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)


def main():
    with Session(get_engine()) as session:
        changed = recompute_counters(session)
    logger.info(f"Counters updated: {changed}")


if __name__ == "__main__":
    main()
