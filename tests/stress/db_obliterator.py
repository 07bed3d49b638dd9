import asyncio
import os
import sys
from datetime import date

sys.path.append(os.getcwd())

from sqlalchemy import select, text  # noqa: E402
from sqlalchemy.exc import IntegrityError  # noqa: E402

from swms.db.session import async_session_factory  # noqa: E402
from swms.models.user import User  # noqa: E402

# 💀 DB OBLITERATOR: every transaction below violates the one-record-per-day rule


async def chaos_transaction(user_id: int, day: date):
    async with async_session_factory() as session:
        txn = await session.begin()
        try:
            insert = text(
                "INSERT INTO attendance (user_id, date, status) VALUES (:uid, :day, 'PRESENT')"
            )
            await session.execute(insert, {"uid": user_id, "day": day})
            # Same user, same day
            await session.execute(insert, {"uid": user_id, "day": day})

            await txn.commit()
            print("❌ CRITICAL: Transaction committed despite duplicate!")
        except IntegrityError as e:
            await txn.rollback()
            print(f"✅ Transaction cleanly rolled back: {e.orig}")


async def mass_rollback_test():
    async with async_session_factory() as session:
        user_id = await session.scalar(select(User.id).limit(1))
    if user_id is None:
        print("No users found; start the app once so the admin is seeded.")
        return

    print("💀 LAUNCHING 100 CONCURRENT TRANSACTIONS (ALL DESTINED TO FAIL)...")
    await asyncio.gather(*(chaos_transaction(user_id, date(1999, 1, 1)) for _ in range(100)))


if __name__ == "__main__":
    asyncio.run(mass_rollback_test())
