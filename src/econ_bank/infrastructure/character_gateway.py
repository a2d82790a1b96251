"""SQL character gateway: read-only view over the host game's characters."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.domain.models import CharacterProfile

_GET_PROFILE_SQL = text("""
    SELECT id, level, character_class, gold, luck
    FROM game_characters
    WHERE id = :character_id
""")


class SqlCharacterGateway:
    async def get_profile(
        self, db: AsyncSession, character_id: str
    ) -> CharacterProfile | None:
        result = await db.execute(_GET_PROFILE_SQL, {"character_id": character_id})
        row = result.fetchone()
        if row is None:
            return None
        return CharacterProfile(
            character_id=row.id,
            level=row.level,
            character_class=row.character_class,
            gold=row.gold,
            luck=row.luck,
        )
