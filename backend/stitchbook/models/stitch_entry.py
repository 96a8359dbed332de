from datetime import datetime
from typing import Optional

from sqlalchemy import String, Integer, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, synonym

from stitchbook.core.database import Base


class StitchEntry(Base):
    """Запись о пошиве: сколько единиц категории сшил работник и когда.

    worker_id — слабая ссылка (без FK): после удаления работника запись
    остаётся и просто не попадает в статистику.
    """
    __tablename__ = "stitch_entries"
    __table_args__ = (
        Index("ix_stitch_entries_worker_date", "worker_id", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    worker_id: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    recorded_by_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    owner_id = synonym("worker_id")
