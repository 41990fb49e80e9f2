#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Create the default global roles.

Run from the repository root:

    python -m scripts.seed_roles [--force]
"""

from __future__ import annotations

import argparse
import logging

from src.config import settings
from src.database import SessionLocal
from src.services.rbac_seed_service import seed_default_roles

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the role seeding CLI."""
    parser = argparse.ArgumentParser(description="Seed the default global roles.")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Remove existing global roles and their assignments first.",
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        created = seed_default_roles(db, force=args.force)
    finally:
        db.close()

    if created:
        logger.info(f"Created {len(created)} roles")
    else:
        logger.info("All default roles already exist")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    raise SystemExit(main())
