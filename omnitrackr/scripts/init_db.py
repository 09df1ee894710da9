"""Create all OmniTrackr tables on the configured database."""
import asyncio

from omnitrackr.database import Base, engine
from omnitrackr.models import activity, user  # noqa: F401


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    asyncio.run(init_db())
