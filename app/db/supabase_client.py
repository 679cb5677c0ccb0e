"""Supabase client shared by the assessment, recommendation and use case tables."""

from functools import lru_cache

from supabase import Client, create_client
from supabase.client import ClientOptions

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Get the Supabase client (cached singleton).

    Authenticates with the service role key; every table access in
    ``app.db`` is server-side.

    Raises:
        RuntimeError: If client initialization fails
    """
    settings = get_settings()
    options = ClientOptions(
        schema=settings.SUPABASE_SCHEMA,
        postgrest_client_timeout=settings.SUPABASE_TIMEOUT_SECONDS,
    )

    try:
        client = create_client(
            settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY, options=options
        )
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client for {settings.SUPABASE_URL}: {e}")
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e

    logger.info(f"Supabase client initialized (schema={settings.SUPABASE_SCHEMA})")
    return client
