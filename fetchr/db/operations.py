"""
Database operations for the commanders table.
"""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fetchr.models.commander import Commander
from fetchr.models.db import CommanderDB
from fetchr.models.record import CommanderRecord


async def get_commander(session: AsyncSession, name: str) -> CommanderDB | None:
    """Get a commander row by exact name, or None."""
    result = await session.execute(select(CommanderDB).where(CommanderDB.name == name))
    return result.scalar_one_or_none()


async def upsert_commander(session: AsyncSession, commander: Commander) -> CommanderDB:
    """
    Insert a commander, or update the existing row with the same name.
    """
    row = await get_commander(session, commander.name)

    if row is None:
        row = CommanderDB(name=commander.name)
        session.add(row)

    row.has_partner = commander.has_partner
    row.partners_with = commander.partner_with
    row.color_identity = commander.color_identity_string
    row.cmc = commander.mana_value

    await session.flush()
    return row


async def save_commanders(session: AsyncSession, commanders: Iterable[Commander]) -> int:
    """
    Upsert every commander.

    Returns:
        Number of commanders written
    """
    count = 0
    for commander in commanders:
        await upsert_commander(session, commander)
        count += 1
    return count


async def get_all_commanders(session: AsyncSession) -> list[CommanderDB]:
    """All commander rows ordered by name."""
    result = await session.execute(select(CommanderDB).order_by(CommanderDB.name.asc()))
    return list(result.scalars().all())


async def count_commanders(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(CommanderDB))
    return int(result.scalar_one())


def commander_to_model(row: CommanderDB) -> Commander:
    """Convert a database row to a domain model."""
    record = CommanderRecord(
        card_name=row.name,
        color_identity=row.color_identity,
        cmc=row.cmc,
        has_partner=row.has_partner,
        partner_with=row.partners_with,
    )
    return record.to_commander()
