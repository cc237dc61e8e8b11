from sqlalchemy import Column, String, Float, Date, DateTime, Integer, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import IntEnum
import uuid
from teams_timesheet.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class TimesheetStatus(IntEnum):
    NONE = 0
    SUBMITTED = 1
    APPROVED = 2
    REJECTED = 3


class Timesheet(Base):
    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("user_id", "task_id", "timesheet_date", name="uq_timesheet_user_task_date"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    task_id = Column(String(36), ForeignKey("tasks.id"), nullable=False, index=True)
    timesheet_date = Column(Date, nullable=False, index=True)
    hours = Column(Float, nullable=False, default=0)
    status = Column(Integer, nullable=False, default=int(TimesheetStatus.NONE), index=True)
    manager_comments = Column(Text, nullable=True)
    submitted_on = Column(DateTime, nullable=True)
    created_on = Column(DateTime, default=datetime.utcnow)
    last_modified_on = Column(DateTime, default=datetime.utcnow)

    task = relationship("Task", back_populates="timesheets")

    def __repr__(self):
        return f"<Timesheet(user={self.user_id}, task={self.task_id}, date={self.timesheet_date}, hours={self.hours}, status={self.status})>"
