"""CRUD operations for the local catalog cache."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.models.catalog import CatalogItem, ItemKind
from cinepick.models.schemas import CatalogItemData

# List endpoints omit these; a record without them must not erase cached values.
_DETAIL_ONLY_FIELDS = frozenset({"duration_minutes", "providers", "tagline"})


async def get_cached_item_by_local_id(db: AsyncSession, local_id: int) -> CatalogItem | None:
    """Get a cached item by its local identifier."""
    return await db.get(CatalogItem, local_id)


async def get_cached_item_by_remote_id(
    db: AsyncSession,
    remote_id: int,
    kind: ItemKind,
) -> CatalogItem | None:
    """Get a cached item by its TMDB identifier."""
    result = await db.execute(
        select(CatalogItem).where(CatalogItem.kind == kind, CatalogItem.remote_id == remote_id)
    )
    return result.scalar_one_or_none()


async def upsert_cached_item(db: AsyncSession, record: CatalogItemData) -> CatalogItem:
    """Insert or update the cached copy of a remote record.

    Keyed by (kind, remote_id). The local id is assigned on first insert and
    never changes. Only columns whose value differs are touched, so writing
    identical data is a no-op.
    """
    item = await get_cached_item_by_remote_id(db, record.remote_id, record.kind)

    if item is None:
        item = CatalogItem(kind=record.kind, remote_id=record.remote_id, **record.cache_fields())
        db.add(item)
        await db.commit()
        await db.refresh(item)
        return item

    changed = False
    for field, value in record.cache_fields().items():
        if value is None and field in _DETAIL_ONLY_FIELDS:
            continue
        if getattr(item, field) != value:
            setattr(item, field, value)
            changed = True

    if changed:
        await db.commit()
        await db.refresh(item)

    return item
