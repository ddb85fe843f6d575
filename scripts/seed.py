"""Seed the catalog database with users, articles and engagement counters."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta

from catalog.config import settings
from catalog.database import engine, async_session, Base
from catalog.models import Article, ArticleStatistics, User

TAGS = ["python", "go", "rust", "typescript", "postgresql", "redis",
        "docker", "kubernetes", "testing", "performance", "security", "devops"]

IMAGES = ["![diagram](https://img.example.com/diagram.png)",
          "![cover](https://img.example.com/cover.jpg)", ""]


async def seed(small: bool = False):
    num_users = 5 if small else 50
    num_articles = 100 if small else 5000

    print(f"Seeding: {num_users} users, {num_articles} articles")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        users = []
        for i in range(num_users):
            user = User(
                username=f"user_{i:04d}",
                email=f"user_{i:04d}@example.com",
                display_name=f"User {i}",
                avatar=f"https://avatars.example.com/{i}.png",
            )
            session.add(user)
            users.append(user)
        await session.flush()
        print(f"  Created {len(users)} users")

        batch_size = 500
        for batch_start in range(0, num_articles, batch_size):
            batch_end = min(batch_start + batch_size, num_articles)
            for i in range(batch_start, batch_end):
                created = datetime.now(timezone.utc) - timedelta(minutes=random.randint(0, 525600))
                owner = random.choice(users)
                topic = random.choice(TAGS)
                session.add(Article(
                    title=f"Article {i}: notes on {topic}",
                    subtitle=f"Part {i % 7 + 1}",
                    author=owner.display_name,
                    content=f"{random.choice(IMAGES)}Everything about {topic}, part {i}. " * 10,
                    category=random.sample(TAGS, k=random.randint(1, 3)),
                    is_published=random.random() > 0.1,  # 90% published
                    is_deleted=random.random() < 0.02,
                    is_original=random.random() > 0.5,
                    created_at=created.strftime(settings.DATE_FORMAT),
                    user_id=owner.id,
                    statistics=ArticleStatistics(
                        view=random.randint(0, 10000),
                        enjoy=random.randint(0, 500),
                        stored=random.randint(0, 200),
                    ),
                ))
            await session.flush()
            print(f"  Batch {batch_start}-{batch_end}: articles created")

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the catalog database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (100 articles)")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
