import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.db.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self, user_id: str, display_name: str, email: Optional[str] = None
    ) -> User:
        user = User(id=user_id, display_name=display_name, email=email)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        logger.info(
            "Created new user user_id=%s", user_id, extra={"user_id": user_id}
        )
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_for_payout(self, user_id: str) -> bool:
        """Take the per-user write lock that serializes payout admission.

        Must be the first write of the transaction. Returns False when the
        user does not exist.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(payout_lock_version=User.payout_lock_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
