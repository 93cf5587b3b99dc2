"""Database schema for taskstats.

A single flat table of task rows: surrogate key, grouping key, duration.
"""

from sqlalchemy import BigInteger, CheckConstraint, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TaskRecord(Base):
    """One submitted duration record.

    Invariant: duration >= 0 (enforced by the store).
    task_id is a non-unique grouping key.
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (CheckConstraint("duration >= 0", name="ck_task_duration_non_negative"),)
