"""Shared route dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from techprep.core.auth import AdminUserDep
from techprep.core.database import session_scope


async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with session_scope() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(db_session)]

# Decoded JWT payload of an admin caller
AdminUser = AdminUserDep
