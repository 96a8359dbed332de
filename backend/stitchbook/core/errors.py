"""
Ошибки сервисного слоя. Роутеры их не ловят: main.py превращает каждую
в структурированный JSON-ответ (что не так и почему).
"""
from typing import Optional


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"detail": self.message, "field": self.field}


class ValidationError(ServiceError):
    """Некорректные входные данные (количество, категория, период, ставка)."""
    status_code = 400


class NotFoundError(ServiceError):
    """Ссылка на несуществующего работника, сотрудника, запись или ставку."""
    status_code = 404


class TransientStoreError(ServiceError):
    """Хранилище недоступно или не ответило вовремя; запрос можно повторить."""
    status_code = 503
