"""Selection of the row store backend."""

import logging
import os
from typing import Optional

from ...domain.ports.row_store import RowStore
from .memory_store import InMemoryRowStore
from .supabase_store import SupabaseConfig, SupabaseRowStore

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "supabase")


def create_row_store(backend: Optional[str] = None) -> RowStore:
    """Create the configured row store.

    Args:
        backend: "memory" or "supabase"; read from STORE_BACKEND when omitted,
            falling back to supabase if SUPABASE_URL is set

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = (backend or os.getenv("STORE_BACKEND") or "").strip().lower()
    if not backend:
        backend = "supabase" if os.getenv("SUPABASE_URL") else "memory"

    if backend not in BACKENDS:
        raise ValueError(f"Unknown store backend '{backend}', expected one of {BACKENDS}")

    logger.info(f"🗄️ Using {backend} row store")
    if backend == "supabase":
        return SupabaseRowStore(SupabaseConfig.from_env())
    return InMemoryRowStore()
