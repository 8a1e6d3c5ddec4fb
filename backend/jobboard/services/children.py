"""
Whole-set replacement of child rows (job skills, profile education...).

Rows are deleted through the ORM rather than with a bulk DELETE so the
session's identity map stays in step with the database and the new set may
reuse primary keys of the old one (e.g. the same (job, skill) pair).
Neither helper commits; the caller owns the transaction.
"""
from typing import Iterable, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


async def delete_children(db: AsyncSession, model: Type, criterion) -> int:
    """Delete every `model` row matching `criterion`. Returns how many went."""
    result = await db.execute(select(model).where(criterion))
    rows = result.scalars().all()
    for row in rows:
        await db.delete(row)
    await db.flush()
    return len(rows)


async def replace_children(db: AsyncSession, model: Type, criterion, new_rows: Iterable) -> list:
    """Delete all rows matching `criterion`, then insert `new_rows`."""
    await delete_children(db, model, criterion)
    new_rows = list(new_rows)
    db.add_all(new_rows)
    await db.flush()
    return new_rows
