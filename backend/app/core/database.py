"""
PostgreSQL (Supabase) database access

This module centralizes ALL the ways the API talks to the backend:
- psycopg2 direct connections (raw SQL used by the repositories)
- SQLAlchemy (table declarations in app.models, schema creation)
- Supabase client (storage buckets and auth admin API)

The SQLAlchemy engine and the Supabase client are created on first use so
importing the application never needs a reachable database.
"""
import logging
import time
from functools import lru_cache
from uuid import UUID

import psycopg2
from psycopg2.extras import RealDictCursor
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from supabase import Client, create_client

from .config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# SQLAlchemy Configuration (schema declarations)
# ============================================================================

# Base for the table declarations in app.models
Base = declarative_base()


@lru_cache(maxsize=1)
def get_engine():
    """SQLAlchemy engine bound to DATABASE_URL"""
    if not settings.DATABASE_URL:
        raise Exception("DATABASE_URL not configured")

    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,  # Verify connection before use
        pool_size=5,
        max_overflow=10,
    )


def create_schema() -> list:
    """
    Create every table declared in app.models that does not exist yet

    Returns:
        Sorted list of table names known to the metadata
    """
    # Registers the models on Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
    tables = sorted(Base.metadata.tables.keys())
    logger.info(f"Schema ensured for tables: {', '.join(tables)}")
    return tables


# ============================================================================
# psycopg2 Direct Connections (for raw SQL queries)
# ============================================================================

def is_uuid(value) -> bool:
    """True if value parses as a UUID (ids of every storefront table are uuids)"""
    try:
        UUID(str(value))
        return True
    except (TypeError, ValueError):
        return False


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Use this for:
    - Repository queries (rows map straight onto domain models)
    - API responses (easier to serialize to JSON)

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM products")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")

    return psycopg2.connect(database_url, cursor_factory=RealDictCursor)


# ============================================================================
# Supabase Client (storage + auth admin)
# ============================================================================

@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Supabase client authenticated with the service role key

    Usage:
        @router.post("/upload")
        def upload(sb: Client = Depends(get_supabase)):
            ...
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise Exception("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")

    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


# ============================================================================
# Database Connection with Retry Logic (SSL Failure Recovery)
# ============================================================================

def get_db_connection_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with automatic retry on SSL/connection failures

    Retries failed connections up to max_retries times with exponential
    backoff between attempts (retry_delay, 2*retry_delay, ...).

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")

    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(database_url)

            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

    raise last_error if last_error else Exception("Connection failed after all retries")
