"""SQLAlchemy Employee model for database operations."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.models.base import Base
from src.schemas.employee import EmployeeRecord, HighlightState


class Employee(Base):
    """
    Employee row in the org chart store.

    ``manager_id`` is a plain column rather than a foreign key: a reference
    to an unknown employee is tolerated and handled when the hierarchy is
    built.
    """

    __tablename__ = "employee"

    # Surrogate key preserving insertion order
    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    employee_id: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Display code such as EMP1234; not required to be unique",
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    designation: Mapped[str] = mapped_column(String(200), nullable=False, default="TBD")
    tier: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="executive, lead, manager, individual or intern",
    )
    team: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    manager_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    photo_asset_key: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Transient UI state
    highlight_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    highlight_reason: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    last_updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_employee_manager", "manager_id"),
        Index("idx_employee_code", "employee_id"),
    )

    def to_record(self) -> EmployeeRecord:
        """Convert the row to the record type used by the hierarchy core."""
        last_updated_at = self.last_updated_at
        if last_updated_at is not None and last_updated_at.tzinfo is None:
            last_updated_at = last_updated_at.replace(tzinfo=timezone.utc)

        return EmployeeRecord(
            id=self.id,
            employee_id=self.employee_id,
            name=self.name,
            designation=self.designation,
            tier=self.tier,
            team=self.team,
            manager_id=self.manager_id,
            photo_asset_key=self.photo_asset_key,
            photo_url=self.photo_url,
            highlight_state=HighlightState(
                active=self.highlight_active,
                reason=self.highlight_reason,
            ),
            last_updated_at=last_updated_at or datetime.now(timezone.utc),
        )

    @classmethod
    def from_record(cls, record: EmployeeRecord) -> "Employee":
        """Build a row carrying exactly the values of ``record``."""
        reason = record.highlight_state.reason
        return cls(
            id=record.id,
            employee_id=record.employee_id,
            name=record.name,
            designation=record.designation,
            tier=record.tier.value,
            team=record.team,
            manager_id=record.manager_id,
            photo_asset_key=record.photo_asset_key,
            photo_url=record.photo_url,
            highlight_active=record.highlight_state.active,
            highlight_reason=reason.value if reason is not None else None,
            last_updated_at=record.last_updated_at,
        )

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name={self.name}, manager_id={self.manager_id})>"
