from typing import Annotated, AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.clock import Clock, SystemClock
from royalty_engine.db.session import AsyncSessionLocal

_system_clock = SystemClock()


async def get_session() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session


def get_clock() -> Clock:
    return _system_clock


SessionDep = Annotated[AsyncSession, Depends(get_session)]
ClockDep = Annotated[Clock, Depends(get_clock)]
