import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User, ROLE_AUDITOR
from app.schemas.user import UserCreate
from app.utils.exceptions import ConflictError, NotFoundError
from app.utils.time import utcnow_iso

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


async def create_user(db: AsyncSession, payload: UserCreate) -> User:
    user_id = payload.id or str(uuid.uuid4())
    if await db.get(User, user_id) is not None:
        raise ConflictError(f"User {user_id} already exists")

    user = User(
        id=user_id,
        name=payload.name,
        phone=payload.phone,
        role=payload.role,
        created_at=utcnow_iso(),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_or_create_auditor(db: AsyncSession, auditor_id: str) -> tuple[User, bool]:
    """Return the user behind ``auditor_id``, provisioning an AUDITOR if it is unknown.

    The new row is flushed but not committed; the caller commits it together
    with whatever it creates next.
    """
    user = await db.get(User, auditor_id)
    if user is not None:
        return user, False

    user = User(
        id=auditor_id,
        name=settings.default_auditor_name,
        role=ROLE_AUDITOR,
        created_at=utcnow_iso(),
    )
    db.add(user)
    await db.flush()
    logger.info("Provisioned auditor %s", auditor_id)
    return user, True
