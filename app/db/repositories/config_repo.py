"""
Repositorio para valores de configuración (config_data).
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import ConfigData


logger = structlog.get_logger(__name__)

SCOPE_DEFAULT = "default"
SCOPE_STORES = "stores"


class ConfigRepository:
    """Lectura y escritura de configuración por alcance."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(
        self,
        path: str,
        scope: str = SCOPE_DEFAULT,
        scope_id: int = 0,
    ) -> ConfigData | None:
        result = await self.db.execute(
            select(ConfigData).where(
                ConfigData.path == path,
                ConfigData.scope == scope,
                ConfigData.scope_id == scope_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_value(
        self,
        path: str,
        store_id: int | None = None,
    ) -> str | None:
        """
        Obtiene un valor; el alcance de la tienda tiene prioridad sobre el
        alcance por defecto.
        """
        if store_id is not None:
            row = await self.get(path, SCOPE_STORES, store_id)
            if row is not None and row.value is not None:
                return row.value

        row = await self.get(path)
        return row.value if row is not None else None

    async def list_by_path(self, path: str) -> list[ConfigData]:
        """Todos los valores de un path (default y por tienda)."""
        result = await self.db.execute(
            select(ConfigData).where(ConfigData.path == path)
        )
        return list(result.scalars().all())

    async def set_value(
        self,
        path: str,
        value: str | None,
        scope: str = SCOPE_DEFAULT,
        scope_id: int = 0,
    ) -> ConfigData:
        """Crea o actualiza un valor."""
        row = await self.get(path, scope, scope_id)
        if row is None:
            row = ConfigData(path=path, scope=scope, scope_id=scope_id, value=value)
            self.db.add(row)
        else:
            row.value = value

        await self.db.flush()

        logger.info("Config value saved", path=path, scope=scope, scope_id=scope_id)
        return row
