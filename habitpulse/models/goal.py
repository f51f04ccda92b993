import json
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from habitpulse.database import Base

ALL_WEEKDAYS = [0, 1, 2, 3, 4, 5, 6]  # 0 = Sunday


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_measurable = Column(Boolean, default=False, nullable=False)
    target_value = Column(Integer, default=0, nullable=False)  # only meaningful if is_measurable
    unit = Column(String(20), default="minutes", nullable=False)  # minutes/pages/reps/liters/km/items
    schedule_days = Column(Text, default=lambda: json.dumps(ALL_WEEKDAYS), nullable=False)  # JSON array like [1,3,5]

    # Interval scheduling, takes precedence over schedule_days when both are set
    interval_days = Column(Integer, nullable=True)
    interval_start_date = Column(Date, nullable=True)

    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="goals")
    completions = relationship(
        "Completion",
        back_populates="goal",
        cascade="all, delete-orphan",
    )

    @property
    def schedule_day_list(self) -> list[int]:
        if not self.schedule_days:
            return []
        return json.loads(self.schedule_days)

    @schedule_day_list.setter
    def schedule_day_list(self, days) -> None:
        self.schedule_days = json.dumps(sorted(set(days)))

    def to_summary(self) -> dict:
        """Display-only subset used by calendar day details."""
        return {
            "id": self.id,
            "name": self.name,
            "is_measurable": self.is_measurable,
            "target_value": self.target_value,
            "unit": self.unit,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "is_measurable": self.is_measurable,
            "target_value": self.target_value,
            "unit": self.unit,
            "schedule_days": self.schedule_day_list,
            "interval_days": self.interval_days,
            "interval_start_date": self.interval_start_date,
            "sort_order": self.sort_order,
            "is_active": self.is_active,
            "created_at": self.created_at,
        }
