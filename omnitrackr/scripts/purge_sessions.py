"""Delete every session whose expiry has passed.

Requests already evict expired sessions lazily; this sweeps the ones nobody comes back for.
Run it from cron if the sessions table grows.
"""
import asyncio

from omnitrackr.database import AsyncSessionLocal, engine
from omnitrackr.stores import sessions as session_store


async def purge_expired_sessions() -> int:
    async with AsyncSessionLocal() as db:
        removed = await session_store.delete_expired(db)
        await db.commit()
    await engine.dispose()
    return removed


if __name__ == "__main__":
    print(f"Removed {asyncio.run(purge_expired_sessions())} expired sessions")
