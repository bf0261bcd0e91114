from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

from leave_portal.database.bootstrap import apply_schema, ensure_demo_users, list_tables
from leave_portal.database.connection import build_connection
from leave_portal.main import load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the leave portal tables in the configured store.")
    parser.add_argument("--seed", action="store_true", help="also create the demo hod/alice/bob accounts")
    args = parser.parse_args()

    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    settings = load_settings()
    conn = build_connection(settings)
    try:
        apply_schema(conn)
        if args.seed:
            ensure_demo_users(conn)
        tables = list_tables(conn)
    finally:
        conn.close()

    print(f"OK: schema applied to {settings.SETTINGS_MODULE} ({conn.backend}, tables={len(tables)})")


if __name__ == "__main__":
    main()
