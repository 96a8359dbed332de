"""
Пароли сотрудников (bcrypt) и токены доступа (JWT).
В токене только id сотрудника: роль и активность каждый раз берутся из БД.
"""
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
import jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.config import settings
from stitchbook.core.logging_config import get_logger
from stitchbook.models import Staff

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def password_matches(staff: Staff, password: str) -> bool:
    if not staff.password_hash or not password:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), staff.password_hash.encode("utf-8"))


def issue_token(staff_id: int, now: Optional[datetime] = None) -> str:
    now = now or datetime.utcnow()
    claims = {
        "sub": str(staff_id),
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def staff_id_from_token(token: str) -> Optional[int]:
    """id сотрудника из токена; None, если подпись неверна или срок истёк."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None


async def authenticate(db: AsyncSession, login: str, password: str) -> Optional[Staff]:
    """Активный сотрудник с таким логином (без учёта регистра) и паролем."""
    login = (login or "").strip().lower()
    if not login:
        return None
    r = await db.execute(
        select(Staff).where(func.lower(Staff.login) == login, Staff.is_active.is_(True))
    )
    staff = r.scalar_one_or_none()
    if staff is None or not password_matches(staff, password):
        logger.warning("Неудачный вход: %s", login)
        return None
    return staff
