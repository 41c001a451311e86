"""
Create the storefront tables in the configured database

Creates products, orders, order_items, payments, profiles, user_roles,
cart_items and contact_messages where they do not exist yet. Existing
tables are left untouched.

Usage:
    python3 scripts/create_schema.py
"""
import os
import sys
import logging
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / '.env')

from app.core.database import create_schema


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    print("=" * 80)
    print("CREATE STOREFRONT SCHEMA")
    print("=" * 80)

    tables = create_schema()
    for table in tables:
        print(f"  - {table}")

    print("\n" + "=" * 80)
    print("DONE")
    print("=" * 80)
