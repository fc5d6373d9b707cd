"""Read-only access to portfolio content rows stored in Supabase."""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from supabase import Client, create_client

from app.core.config import settings
from app.core.logging import get_logger
from app.services.content.categories import ContentCategory

logger = get_logger(__name__)

Row = Dict[str, Any]


class ContentStore(Protocol):
    async def select(self, table: str, limit: int) -> List[Row]:
        """Return up to ``limit`` rows of ``table``; raise when the table does not resolve."""
        ...


class SupabaseContentStore:
    """Content store backed by the Supabase PostgREST API.

    The client is created on first use, so a missing or invalid Supabase
    configuration surfaces as a failed table read instead of a startup error.
    """

    def __init__(
        self,
        client: Optional[Client] = None,
        url: Optional[str] = None,
        key: Optional[str] = None,
    ):
        self._client = client
        self.url = settings.SUPABASE_URL if url is None else url
        self.key = settings.SUPABASE_KEY if key is None else key

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.url and self.key)

    def _get_client(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.configured:
            raise RuntimeError("Supabase is not configured (SUPABASE_URL / SUPABASE_KEY)")
        try:
            self._client = create_client(supabase_url=self.url, supabase_key=self.key)
        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise
        logger.info(f"Supabase content store initialized for {self.url}")
        return self._client

    async def select(self, table: str, limit: int) -> List[Row]:
        client = self._get_client()

        # supabase-py is synchronous; keep the event loop free while PostgREST answers.
        def _sync_select():
            return client.table(table).select("*").limit(limit).execute()

        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(None, _sync_select)
        data = getattr(response, "data", None)
        return list(data) if isinstance(data, list) else []


class ContentStoreAdapter:
    """Resolves logical categories against whichever table name a deployment uses."""

    def __init__(self, store: ContentStore):
        self.store = store

    async def fetch_category(self, candidate_names: Sequence[str], limit: int) -> List[Row]:
        """
        Return rows from the first candidate table that resolves.

        A candidate that fails (missing table, schema mismatch, network error)
        is logged and skipped. When every candidate fails an empty list is
        returned; this method never raises.

        Args:
            candidate_names: Table names to try, preferred name first
            limit: Maximum number of rows to read

        Returns:
            Rows of the first successful candidate (possibly empty)
        """
        for name in candidate_names:
            try:
                rows = await self.store.select(name, limit)
            except Exception as e:
                logger.warning(f"content table '{name}' failed: {getattr(e, 'message', None) or e}")
                continue
            return [dict(row) for row in rows if isinstance(row, Mapping)]
        if candidate_names:
            logger.info(f"no content table resolved among {list(candidate_names)}")
        return []

    async def fetch_all(
        self,
        aliases: Mapping[ContentCategory, Sequence[str]],
        limit: int,
    ) -> Dict[ContentCategory, List[Row]]:
        """Fetch every category concurrently; categories are independent of each other."""
        categories = list(aliases.keys())
        results = await asyncio.gather(
            *(self.fetch_category(aliases[category], limit) for category in categories)
        )
        return dict(zip(categories, results))
