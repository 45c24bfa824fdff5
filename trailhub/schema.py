"""PostgreSQL schema for events, competitions, editions and the ledgers."""

from typing import List

SCHEMA_STATEMENTS: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS events (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        name VARCHAR(200) NOT NULL,
        slug VARCHAR(220) UNIQUE NOT NULL,
        city VARCHAR(120),
        country VARCHAR(80),
        status VARCHAR(20) NOT NULL DEFAULT 'PUBLISHED'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS competitions (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        event_id TEXT NOT NULL REFERENCES events(id) ON DELETE CASCADE,
        name VARCHAR(200) NOT NULL,
        slug VARCHAR(220) UNIQUE NOT NULL,
        type VARCHAR(30) NOT NULL DEFAULT 'TRAIL',
        base_distance NUMERIC(8, 2),
        base_elevation INTEGER,
        base_max_participants INTEGER,
        status VARCHAR(20) NOT NULL DEFAULT 'PUBLISHED'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS editions (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        competition_id TEXT NOT NULL REFERENCES competitions(id) ON DELETE CASCADE,
        year INTEGER NOT NULL,
        slug VARCHAR(240) UNIQUE NOT NULL,
        distance NUMERIC(8, 2),
        elevation INTEGER,
        max_participants INTEGER,
        current_participants INTEGER NOT NULL DEFAULT 0,
        city VARCHAR(120),
        status VARCHAR(30) NOT NULL DEFAULT 'UPCOMING',
        registration_status VARCHAR(30) NOT NULL DEFAULT 'COMING_SOON',
        registration_open_date TIMESTAMP,
        registration_close_date TIMESTAMP,
        start_date TIMESTAMP,
        end_date TIMESTAMP,
        UNIQUE (competition_id, year)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        username VARCHAR(80) UNIQUE NOT NULL,
        first_name VARCHAR(80),
        last_name VARCHAR(80),
        country VARCHAR(80)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_competitions (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        competition_id TEXT NOT NULL REFERENCES competitions(id) ON DELETE CASCADE,
        status VARCHAR(20) NOT NULL DEFAULT 'INTERESTED',
        finish_time VARCHAR(12),
        finish_time_seconds INTEGER,
        position INTEGER,
        category_position INTEGER,
        notes TEXT,
        personal_rating SMALLINT CHECK (personal_rating BETWEEN 1 AND 5),
        completed_at TIMESTAMP,
        marked_at TIMESTAMP NOT NULL DEFAULT NOW(),
        UNIQUE (user_id, competition_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_editions (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        edition_id TEXT NOT NULL REFERENCES editions(id) ON DELETE CASCADE,
        status VARCHAR(20) NOT NULL DEFAULT 'COMPLETED',
        finish_time VARCHAR(12),
        finish_time_seconds INTEGER,
        position INTEGER,
        category_position INTEGER,
        category_type VARCHAR(20),
        category_name VARCHAR(100),
        bib_number VARCHAR(20),
        notes TEXT,
        personal_rating SMALLINT CHECK (personal_rating BETWEEN 1 AND 5),
        completed_at TIMESTAMP,
        created_at TIMESTAMP NOT NULL DEFAULT NOW(),
        UNIQUE (user_id, edition_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_competitions_event ON competitions(event_id)",
    "CREATE INDEX IF NOT EXISTS idx_editions_competition_year ON editions(competition_id, year DESC)",
    "CREATE INDEX IF NOT EXISTS idx_user_competitions_user ON user_competitions(user_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_user_editions_user ON user_editions(user_id, status)",
]


def create_tables(conn) -> None:
    """Create every table and index if missing, then commit."""
    with conn.cursor() as cur:
        for stmt in SCHEMA_STATEMENTS:
            cur.execute(stmt)
    conn.commit()
