import asyncio
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from meetfood.db.session import async_session_maker
from meetfood.models.user import User

async def list_users():
    async with async_session_maker() as session:
        result = await session.execute(select(User).order_by(User.created_at))
        users = result.scalars().all()
        if not users:
            print("No users found in database.")
        else:
            print("Current Users:")
            for u in users:
                print(
                    f"- {u.user_name} ({u.email}) | videos: {len(u.videos or [])}"
                    f" | collections: {len(u.collections or [])} | liked: {len(u.liked_videos or [])}"
                )

if __name__ == "__main__":
    asyncio.run(list_users())
