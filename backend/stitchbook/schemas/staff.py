from typing import List, Optional

from pydantic import BaseModel

from stitchbook.models import StaffRole


class StaffResponse(BaseModel):
    id: int
    name: str
    phone_number: str
    email: Optional[str] = None
    role: str
    login: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True

    @classmethod
    def from_staff(cls, s) -> "StaffResponse":
        return cls(
            id=s.id,
            name=s.name,
            phone_number=s.phone_number,
            email=s.email,
            role=s.role.value,
            login=s.login,
            is_active=s.is_active,
        )


class StaffCreate(BaseModel):
    name: str
    phone_number: str
    email: Optional[str] = None
    role: StaffRole = StaffRole.ROLE_STAFF
    login: Optional[str] = None
    password: Optional[str] = None


class StaffUpdate(BaseModel):
    name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    role: Optional[StaffRole] = None
    login: Optional[str] = None
    password: Optional[str] = None
    is_active: Optional[bool] = None


class MenuItem(BaseModel):
    id: str
    label: str
    href: Optional[str] = None
    group: Optional[str] = None
    divider: Optional[bool] = None
    action: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    staff: StaffResponse


class MeResponse(StaffResponse):
    """Сотрудник из токена и пункты меню для его роли."""
    menu_items: List[MenuItem]
