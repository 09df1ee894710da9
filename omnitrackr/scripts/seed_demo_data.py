"""
Demo data for OmniTrackr.
Creates a demo user with a handful of categories and tags and a few weeks of activities.
"""
import argparse
import asyncio
import random
from datetime import datetime, timedelta, timezone

from faker import Faker
from sqlalchemy import update

from omnitrackr.database import AsyncSessionLocal, Base, engine
from omnitrackr.models.activity import Activity
from omnitrackr.stores import activities as activity_store
from omnitrackr.stores import categories as category_store
from omnitrackr.stores import tags as tag_store
from omnitrackr.stores import users as user_store
from omnitrackr.utils.security import get_password_hash

fake = Faker()

CATEGORIES = {
    "Work": "#1F77B4",
    "Fitness": "#2CA02C",
    "Reading": "#9467BD",
    "Errands": "#FF7F0E",
    "Family": "#D62728",
}

TAGS = {
    "urgent": "#E41A1C",
    "deep-work": "#377EB8",
    "outdoors": "#4DAF4A",
    "social": "#984EA3",
    "learning": "#FF7F00",
    "quick": "#A65628",
}


async def seed(username: str, password: str, activities: int, days: int):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        if await user_store.username_exists(db, username):
            print(f"User '{username}' already exists, nothing to do.")
            return

        user = await user_store.create_user(db, username, fake.unique.email(), get_password_hash(password))
        categories = [
            await category_store.create_category(db, user.id, name, color)
            for name, color in CATEGORIES.items()
        ]
        tags = [await tag_store.create_tag(db, user.id, name, color) for name, color in TAGS.items()]

        now = datetime.now(timezone.utc)
        for _ in range(activities):
            category = random.choice(categories + [None])
            activity = await activity_store.create_activity(
                db,
                user.id,
                fake.sentence(nb_words=4).rstrip("."),
                fake.paragraph(nb_sentences=2) if random.random() < 0.7 else "",
                category.id if category else None,
            )
            chosen = random.sample(tags, k=random.randint(0, 3))
            await activity_store.replace_tags(db, activity.id, [t.id for t in chosen])

            # Backdate so the timeline has something to show
            created = now - timedelta(days=random.randint(0, days - 1), minutes=random.randint(0, 1439))
            await db.execute(
                update(Activity).where(Activity.id == activity.id).values(created_at=created, updated_at=created)
            )

        await db.commit()
        print(f"Seeded user '{username}' with {activities} activities, "
              f"{len(categories)} categories and {len(tags)} tags")


async def main(args):
    try:
        await seed(args.username, args.password, args.activities, args.days)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed OmniTrackr with demo data")
    parser.add_argument("--username", default="demo")
    parser.add_argument("--password", default="demo1234")
    parser.add_argument("--activities", type=int, default=60)
    parser.add_argument("--days", type=int, default=30)
    args = parser.parse_args()
    asyncio.run(main(args))
