"""Report video posts whose denormalised counters disagree with the lists they summarise."""
import asyncio
import os
import sys
from collections import Counter

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from meetfood.db.session import async_session_maker
from meetfood.models.user import User
from meetfood.models.video_post import VideoPost


async def check_counters():
    async with async_session_maker() as db:
        users = (await db.execute(select(User))).scalars().all()
        collected = Counter(c.get("videoPostId") for u in users for c in u.collections or [])

        posts = (await db.execute(select(VideoPost))).scalars().all()
        problems = 0
        for post in posts:
            pid = str(post.id)
            issues = []
            if post.count_like != len(post.likes or []):
                issues.append(f"countLike={post.count_like} but {len(post.likes or [])} likes")
            if post.count_comment != len(post.comments or []):
                issues.append(f"countComment={post.count_comment} but {len(post.comments or [])} comments")
            if post.count_collections != collected.get(pid, 0):
                issues.append(f"countCollections={post.count_collections} but {collected.get(pid, 0)} collectors")
            if issues:
                problems += 1
                print(f"- {pid} ({post.post_title}): " + "; ".join(issues))

        post_ids = {str(p.id) for p in posts}
        dangling = sum(
            1
            for u in users
            for entry in [*(u.collections or []), *(u.liked_videos or [])]
            if entry.get("videoPostId") not in post_ids
        )
        print(f"\nChecked {len(posts)} posts: {problems} with mismatched counters")
        print(f"Dangling collection/like references: {dangling}")


if __name__ == "__main__":
    asyncio.run(check_counters())
