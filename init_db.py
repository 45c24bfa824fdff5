#!/usr/bin/env python3
"""
Create the trailhub PostgreSQL schema (idempotent).
"""
import os
import sys

import psycopg2

from trailhub.schema import create_tables

TABLES = ("events", "competitions", "editions", "users", "user_competitions", "user_editions")


def main():
    """Create tables and print a row-count summary"""
    database_url = os.environ.get('DATABASE_URL')
    if not database_url:
        print("ERROR: DATABASE_URL environment variable not set")
        return 1

    try:
        conn = psycopg2.connect(database_url)
        print("Connected to PostgreSQL database")

        create_tables(conn)
        print("Schema created successfully!")

        print("\nTable summary:")
        with conn.cursor() as cur:
            for table in TABLES:
                cur.execute(f"SELECT COUNT(*) FROM {table}")
                print(f"  {table}: {cur.fetchone()[0]} rows")
        conn.close()
    except psycopg2.Error as e:
        print(f"ERROR during schema setup: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
