"""
Вход сотрудника и зависимости доступа.

Токен хранит только id сотрудника. На каждый запрос сотрудник читается из БД,
поэтому отключение учётной записи или смена роли действуют сразу.
"""
from typing import Iterable, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from stitchbook.core.database import get_db
from stitchbook.core.logging_config import get_logger
from stitchbook.core.permissions import Resource, get_menu_items, roles_for
from stitchbook.models import Staff, StaffRole
from stitchbook.schemas.staff import LoginResponse, MeResponse, MenuItem, StaffResponse
from stitchbook.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])
bearer = HTTPBearer(auto_error=False)
logger = get_logger(__name__)


def _unauthorized(detail: str = "Требуется авторизация") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_staff(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> Staff:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized()
    staff_id = auth_service.staff_id_from_token(credentials.credentials)
    if staff_id is None:
        logger.warning("Токен не прошёл проверку (неверный или истёк)")
        raise _unauthorized()
    staff = await db.get(Staff, staff_id)
    if staff is None or not staff.is_active:
        raise _unauthorized("Учётная запись отключена")
    return staff


def require_roles(roles: Iterable[StaffRole]):
    allowed = frozenset(roles)

    async def _check(staff: Staff = Depends(get_current_staff)) -> Staff:
        if staff.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Недостаточно прав")
        return staff
    return _check


def require_resource(resource: Resource):
    return require_roles(roles_for(resource))


RequireAnyAuth = require_roles(StaffRole)
RequireAdmin = require_roles([StaffRole.ROLE_ADMIN])
RequireEntryAccess = require_resource(Resource.ENTRIES)
RequireStatsAccess = require_resource(Resource.STATS)
RequireWorkersAccess = require_resource(Resource.WORKERS)
RequireInventoryAccess = require_resource(Resource.INVENTORY)


@router.post("/login", response_model=LoginResponse)
async def login(
    form: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Логин сотрудника (поле username формы) и пароль → токен."""
    staff = await auth_service.authenticate(db, form.username, form.password)
    if staff is None:
        raise _unauthorized("Неверный логин или пароль")
    logger.info("Вход: %s (#%s)", staff.login, staff.id)
    return LoginResponse(
        access_token=auth_service.issue_token(staff.id),
        staff=StaffResponse.from_staff(staff),
    )


@router.get("/me", response_model=MeResponse)
async def me(staff: Staff = Depends(RequireAnyAuth)):
    base = StaffResponse.from_staff(staff)
    return MeResponse(
        **base.model_dump(),
        menu_items=[MenuItem(**item) for item in get_menu_items(staff.role.value)],
    )
