"""
Lock por orden para intentos de donación.
Evita que dos requests concurrentes lean y escriban a la vez el contador
de intentos (donationTryCount) de la misma orden.
"""

import structlog
import redis.asyncio as redis
from redis.exceptions import RedisError

from app.config import settings


logger = structlog.get_logger(__name__)

# Tiempo máximo de vida del lock (segundos)
DONATION_LOCK_TTL_SECONDS = 30


class DonationLockManager:
    """
    Lock de donaciones usando Redis (SET NX EX).
    """

    def __init__(self, redis_client: redis.Redis):
        self._redis = redis_client
        self._prefix = "donation:lock:"

    def _make_key(self, order_id: int | str) -> str:
        """Genera la clave Redis."""
        return f"{self._prefix}{order_id}"

    async def acquire(
        self,
        order_id: int | str,
        ttl_seconds: int = DONATION_LOCK_TTL_SECONDS,
    ) -> bool:
        """
        Intenta adquirir el lock de una orden.

        Returns:
            True si se adquirió, False si otro request lo tiene
        """
        try:
            acquired = await self._redis.set(
                self._make_key(order_id),
                "processing",
                nx=True,  # Solo si no existe
                ex=ttl_seconds,
            )
            return bool(acquired)

        except RedisError as e:
            logger.error(
                "Redis error acquiring donation lock",
                error=str(e),
                order_id=str(order_id),
            )
            # Sin Redis no bloqueamos la donación
            return True

    async def release(self, order_id: int | str) -> None:
        """Libera el lock de una orden."""
        try:
            await self._redis.delete(self._make_key(order_id))
        except RedisError as e:
            logger.error(
                "Redis error releasing donation lock",
                error=str(e),
                order_id=str(order_id),
            )


class InMemoryDonationLockManager:
    """
    Implementación en memoria para desarrollo sin Redis.

    NO USAR EN PRODUCCIÓN - no es distribuido.
    """

    def __init__(self):
        self._locks: set[str] = set()

    async def acquire(
        self,
        order_id: int | str,
        ttl_seconds: int = DONATION_LOCK_TTL_SECONDS,
    ) -> bool:
        key = str(order_id)
        if key in self._locks:
            return False
        self._locks.add(key)
        return True

    async def release(self, order_id: int | str) -> None:
        self._locks.discard(str(order_id))


# Singleton del cliente Redis
_redis_client: redis.Redis | None = None
_lock_manager: DonationLockManager | None = None


async def get_redis_client() -> redis.Redis:
    """Obtiene o crea el cliente Redis."""
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
        )
        logger.info("Redis client initialized", url=settings.REDIS_URL.split("@")[-1])

    return _redis_client


async def get_donation_lock_manager() -> DonationLockManager:
    """Obtiene o crea el gestor de locks."""
    global _lock_manager

    if _lock_manager is None:
        redis_client = await get_redis_client()
        _lock_manager = DonationLockManager(redis_client)

    return _lock_manager


async def close_redis() -> None:
    """Cierra la conexión de Redis."""
    global _redis_client, _lock_manager

    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None
        _lock_manager = None
        logger.info("Redis connection closed")


async def get_donation_lock_manager_with_fallback() -> DonationLockManager | InMemoryDonationLockManager:
    """
    Obtiene el gestor de locks con fallback a memoria.

    Intenta conectar a Redis, si falla usa implementación en memoria.
    """
    try:
        return await get_donation_lock_manager()
    except (RedisError, ValueError) as e:
        logger.warning(
            "Failed to connect to Redis, using in-memory donation lock",
            error=str(e),
        )
        return InMemoryDonationLockManager()
