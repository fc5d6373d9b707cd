from app.services.content.categories import CATEGORY_ORDER, DEFAULT_TABLE_ALIASES, ContentCategory
from app.services.content.store import ContentStore, ContentStoreAdapter, SupabaseContentStore

__all__ = [
    "CATEGORY_ORDER",
    "DEFAULT_TABLE_ALIASES",
    "ContentCategory",
    "ContentStore",
    "ContentStoreAdapter",
    "SupabaseContentStore",
]
