"""Database initialization and schema management."""

from typing import Any, Dict

import psycopg
from psycopg.errors import DatabaseError
from rich.console import Console

from .connection import get_connection

console = Console()


SCHEMA_SQL = """
-- Raw feed items awaiting rewrite
CREATE TABLE IF NOT EXISTS unprocessed_articles (
    id SERIAL PRIMARY KEY,
    source_name TEXT NOT NULL,
    source_url TEXT,
    title TEXT NOT NULL,
    link TEXT NOT NULL,
    guid TEXT,
    description TEXT NOT NULL DEFAULT '',
    content TEXT NOT NULL DEFAULT '',
    published_at TIMESTAMPTZ,
    image_url TEXT,
    original_image_url TEXT,
    image_attribution TEXT,
    image_downloaded BOOLEAN NOT NULL DEFAULT FALSE,
    stock_image_source TEXT,
    categories TEXT[] NOT NULL DEFAULT ARRAY['general'],
    language TEXT NOT NULL DEFAULT 'mr',
    fetched_at TIMESTAMPTZ NOT NULL,
    processed BOOLEAN NOT NULL DEFAULT FALSE,
    processed_at TIMESTAMPTZ,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(link)
);

-- Rewritten articles
CREATE TABLE IF NOT EXISTS processed_articles (
    id SERIAL PRIMARY KEY,
    unprocessed_id INTEGER NOT NULL REFERENCES unprocessed_articles(id),
    source_name TEXT NOT NULL,
    source_url TEXT,
    title TEXT NOT NULL,
    original_title TEXT NOT NULL,
    rewritten_description TEXT NOT NULL,
    original_description TEXT NOT NULL DEFAULT '',
    link TEXT NOT NULL,
    guid TEXT,
    image_url TEXT,
    original_image_url TEXT,
    categories TEXT[] NOT NULL DEFAULT ARRAY['general'],
    language TEXT NOT NULL DEFAULT 'mr',
    published_at TIMESTAMPTZ,
    processed_at TIMESTAMPTZ NOT NULL,
    is_title_rewritten BOOLEAN NOT NULL DEFAULT FALSE,
    disclaimer TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(link)
);

-- Links already yielded by a source
CREATE TABLE IF NOT EXISTS fetch_log (
    source_name TEXT NOT NULL,
    link TEXT NOT NULL,
    fetched_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (source_name, link)
);

-- Create indexes
CREATE INDEX IF NOT EXISTS idx_unprocessed_pending ON unprocessed_articles(processed, fetched_at);
CREATE INDEX IF NOT EXISTS idx_unprocessed_categories ON unprocessed_articles USING GIN (categories);
CREATE INDEX IF NOT EXISTS idx_processed_unprocessed_id ON processed_articles(unprocessed_id);
CREATE INDEX IF NOT EXISTS idx_processed_published_at ON processed_articles(published_at);

-- Update trigger function
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';

-- Create update triggers
DROP TRIGGER IF EXISTS update_unprocessed_updated_at ON unprocessed_articles;
CREATE TRIGGER update_unprocessed_updated_at BEFORE UPDATE ON unprocessed_articles
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

DROP TRIGGER IF EXISTS update_processed_updated_at ON processed_articles;
CREATE TRIGGER update_processed_updated_at BEFORE UPDATE ON processed_articles
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
"""


def validate_connection(config: Dict[str, Any]) -> bool:
    """Validate database connection."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except psycopg.Error as e:
        console.print(f"[red]Database connection failed: {e}[/red]")
        return False


def init_database(config: Dict[str, Any]) -> None:
    """Initialize database schema. Safe to run repeatedly."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
                conn.commit()
                console.print("[green]Database schema initialized successfully[/green]")
    except DatabaseError as e:
        console.print(f"[red]Error initializing database: {e}[/red]")
        raise
