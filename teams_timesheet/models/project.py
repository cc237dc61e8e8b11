from sqlalchemy import Column, String, Float, Date, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from teams_timesheet.database import Base
from teams_timesheet.models.timesheet import new_id


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    client_name = Column(String(200), nullable=False)
    billable_hours = Column(Float, nullable=False, default=0)
    non_billable_hours = Column(Float, nullable=False, default=0)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), nullable=False)
    created_on = Column(DateTime, default=datetime.utcnow)

    members = relationship("Member", back_populates="project", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Project(title={self.title}, client={self.client_name}, {self.start_date}..{self.end_date})>"


class Member(Base):
    __tablename__ = "members"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    is_billable = Column(Boolean, nullable=False, default=True)
    is_removed = Column(Boolean, nullable=False, default=False)

    project = relationship("Project", back_populates="members")

    def __repr__(self):
        return f"<Member(user={self.user_id}, project={self.project_id}, billable={self.is_billable})>"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    member_mapping_id = Column(String(36), ForeignKey("members.id"), nullable=True)
    title = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_removed = Column(Boolean, nullable=False, default=False)

    project = relationship("Project", back_populates="tasks")
    member_mapping = relationship("Member")
    timesheets = relationship("Timesheet", back_populates="task")

    def __repr__(self):
        return f"<Task(title={self.title}, project={self.project_id})>"
