#!/usr/bin/env python
"""Seed sales reps and cohorts into the record store.

The dashboard only reads these two tables, so they are maintained with
this script instead.

Usage:
    python scripts/seed_reference_data.py path/to/reference.json

The JSON file holds two lists:

    {
      "sales_reps": [{"name": "Jane Doe"}],
      "cohorts": [
        {"name": "Leadership EMEA March", "course": "Leadership",
         "region": "EMEA", "date": "2026-03-12", "seats": 25}
      ]
    }

Requirements:
    - SUPABASE_URL and SUPABASE_SECRET_KEY environment variables must be set
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.models.tracker import Region
from src.services.record_store import COHORTS_TABLE, SALES_REPS_TABLE, RecordStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def validate_cohort(cohort: dict) -> list[str]:
    """List problems with a cohort entry."""
    problems = []
    for key in ("name", "course", "region", "date"):
        if not cohort.get(key):
            problems.append(f"missing {key}")
    if cohort.get("region") and cohort["region"] not in {r.value for r in Region}:
        problems.append(f"unknown region {cohort['region']}")
    if not isinstance(cohort.get("seats", 0), int) or cohort.get("seats", 0) < 0:
        problems.append("seats must be a non-negative integer")
    return problems


async def seed(path: Path) -> int:
    """Insert every rep and cohort from the file that is not already stored.

    Reps are matched by name, cohorts by name and date.

    Returns:
        int: Number of failed inserts.
    """
    payload = json.loads(path.read_text())
    store = RecordStore()
    failures = 0

    existing_reps = await store.fetch_all(SALES_REPS_TABLE, "name")
    known_reps = {rep.get("name") for rep in existing_reps.data}
    for rep in payload.get("sales_reps", []):
        if rep.get("name") in known_reps:
            logger.info("Sales rep %s already present", rep.get("name"))
            continue
        result = await store.insert(SALES_REPS_TABLE, {"name": rep["name"]})
        if not result.ok:
            failures += 1
            logger.error("Could not add sales rep %s: %s", rep.get("name"), result.error)
        else:
            logger.info("Added sales rep %s", rep["name"])

    existing_cohorts = await store.fetch_all(COHORTS_TABLE, "date")
    known_cohorts = {(c.get("name"), c.get("date")) for c in existing_cohorts.data}
    for cohort in payload.get("cohorts", []):
        problems = validate_cohort(cohort)
        if problems:
            failures += 1
            logger.error("Skipping cohort %s: %s", cohort.get("name"), ", ".join(problems))
            continue
        if (cohort["name"], cohort["date"]) in known_cohorts:
            logger.info("Cohort %s on %s already present", cohort["name"], cohort["date"])
            continue
        record = {key: cohort.get(key) for key in ("name", "course", "region", "date", "seats")}
        result = await store.insert(COHORTS_TABLE, record)
        if not result.ok:
            failures += 1
            logger.error("Could not add cohort %s: %s", cohort["name"], result.error)
        else:
            logger.info("Added cohort %s (%s)", cohort["name"], cohort["date"])

    return failures


async def main() -> None:
    """Main entry point for the seed script."""
    if len(sys.argv) != 2:
        print("Usage: python scripts/seed_reference_data.py path/to/reference.json")
        sys.exit(2)

    failures = await seed(Path(sys.argv[1]))
    if failures:
        logger.error("Seeding finished with %d failures", failures)
        sys.exit(1)
    logger.info("Seeding finished")


if __name__ == "__main__":
    asyncio.run(main())
