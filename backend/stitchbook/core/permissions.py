"""
Права: роль × ресурс. Админ управляет ставками, сотрудниками, выплатами и
каталогом; сотрудник вносит выработку и смотрит статистику.
"""
from enum import Enum
from typing import List, Optional

from stitchbook.models.staff import StaffRole


class Resource(str, Enum):
    """Ресурсы для проверки доступа."""
    ENTRIES = "ENTRIES"           # приём записей пошива и выработки
    STATS = "STATS"               # недельная статистика, выручка
    WORKERS = "WORKERS"           # работники и их группы
    INVENTORY = "INVENTORY"       # закупки материалов
    RATES = "RATES"               # изменение ставок
    PAYMENTS = "PAYMENTS"         # выплаты сотрудникам
    CATALOG = "CATALOG"           # изменение каталога изделий
    USERS = "USERS"               # управление сотрудниками


# Ресурс → роли, которым разрешён доступ
RESOURCE_ROLES = {
    Resource.ENTRIES: [StaffRole.ROLE_STAFF, StaffRole.ROLE_ADMIN],
    Resource.STATS: [StaffRole.ROLE_STAFF, StaffRole.ROLE_ADMIN],
    Resource.WORKERS: [StaffRole.ROLE_STAFF, StaffRole.ROLE_ADMIN],
    Resource.INVENTORY: [StaffRole.ROLE_STAFF, StaffRole.ROLE_ADMIN],
    Resource.RATES: [StaffRole.ROLE_ADMIN],
    Resource.PAYMENTS: [StaffRole.ROLE_ADMIN],
    Resource.CATALOG: [StaffRole.ROLE_ADMIN],
    Resource.USERS: [StaffRole.ROLE_ADMIN],
}


def _parse_role(role: str) -> Optional[StaffRole]:
    try:
        return StaffRole(role)
    except ValueError:
        return None


def can_access_resource(role: str, resource: Resource) -> bool:
    """Проверка: есть ли у роли доступ к ресурсу."""
    r = _parse_role(role)
    if r is None:
        return False
    return r in RESOURCE_ROLES.get(resource, [])


def roles_for(resource: Resource) -> List[StaffRole]:
    return list(RESOURCE_ROLES[resource])


def get_menu_items(role: str) -> List[dict]:
    """Пункты меню для роли: id, label, href, group (опционально), action, divider."""
    if _parse_role(role) is None:
        return []

    items = []

    if can_access_resource(role, Resource.ENTRIES):
        items.append({"id": "entries", "label": "Приём работы", "href": "entries.html", "group": "Цех"})
    if can_access_resource(role, Resource.STATS):
        items.append({"id": "weekly", "label": "Недельная статистика", "href": "weekly.html", "group": "Цех"})
    if can_access_resource(role, Resource.WORKERS):
        items.append({"id": "workers", "label": "Работники", "href": "workers.html", "group": "Цех"})
    if can_access_resource(role, Resource.INVENTORY):
        items.append({"id": "inventory", "label": "Материалы", "href": "inventory.html", "group": "Цех"})

    if can_access_resource(role, Resource.RATES):
        items.append({"id": "rates", "label": "Ставки", "href": "rates.html", "group": "Управление"})
    if can_access_resource(role, Resource.PAYMENTS):
        items.append({"id": "payments", "label": "Выплаты", "href": "payments.html", "group": "Управление"})
    if can_access_resource(role, Resource.CATALOG):
        items.append({"id": "products", "label": "Каталог", "href": "products.html", "group": "Управление"})
    if can_access_resource(role, Resource.USERS):
        items.append({"id": "staff", "label": "Сотрудники", "href": "staff.html", "group": "Управление"})

    items.append({"id": "_div", "label": "", "divider": True})
    items.append({"id": "logout", "label": "Выйти", "href": "login.html", "action": "logout"})
    return items
