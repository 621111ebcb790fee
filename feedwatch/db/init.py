"""Database schema definitions."""

POSTGRES_SCHEMA_SQL = """
-- Categories table
CREATE TABLE IF NOT EXISTS categories (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    description TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Sources table
CREATE TABLE IF NOT EXISTS sources (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    url TEXT NOT NULL,
    category TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Articles table
CREATE TABLE IF NOT EXISTS articles (
    id SERIAL PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL DEFAULT '',
    image_url TEXT,
    canonical_url TEXT NOT NULL,
    published_at TIMESTAMPTZ,
    published_date TEXT,
    duration TEXT,
    source_name TEXT NOT NULL,
    category TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(canonical_url)
);

CREATE INDEX IF NOT EXISTS idx_articles_source_name ON articles(source_name);
CREATE INDEX IF NOT EXISTS idx_articles_category ON articles(category);
CREATE INDEX IF NOT EXISTS idx_articles_published_at ON articles(published_at);
"""

SQLITE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    description TEXT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS sources (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    url TEXT NOT NULL,
    category TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS articles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    content TEXT NOT NULL DEFAULT '',
    image_url TEXT,
    canonical_url TEXT NOT NULL,
    published_at TEXT,
    published_date TEXT,
    duration TEXT,
    source_name TEXT NOT NULL,
    category TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(canonical_url)
);

CREATE INDEX IF NOT EXISTS idx_articles_source_name ON articles(source_name);
CREATE INDEX IF NOT EXISTS idx_articles_category ON articles(category);
CREATE INDEX IF NOT EXISTS idx_articles_published_at ON articles(published_at);
"""

# Shared by both backends; %s placeholders are rewritten for SQLite.
UPSERT_ARTICLE_SQL = """
INSERT INTO articles (
    title, content, image_url, canonical_url, published_at,
    published_date, duration, source_name, category
) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
ON CONFLICT (canonical_url) DO UPDATE SET
    title = excluded.title,
    content = excluded.content,
    image_url = excluded.image_url,
    published_at = excluded.published_at,
    published_date = excluded.published_date,
    duration = excluded.duration,
    source_name = excluded.source_name,
    category = excluded.category,
    updated_at = CURRENT_TIMESTAMP
"""

INSERT_CATEGORY_SQL = """
INSERT INTO categories (name, description)
VALUES (%s, %s)
ON CONFLICT (name) DO NOTHING
"""

UPSERT_SOURCE_SQL = """
INSERT INTO sources (name, url, category)
VALUES (%s, %s, %s)
ON CONFLICT (name) DO UPDATE SET
    url = excluded.url,
    category = excluded.category,
    updated_at = CURRENT_TIMESTAMP
"""
