import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Enum, Index, String, Text

from jobboard.core.database import Base


class JobType(str, enum.Enum):
    FULL_TIME = "Full-Time"
    PART_TIME = "Part-Time"
    CONTRACT = "Contract"


class JobStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class JobPost(Base):
    __tablename__ = "job_posts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False, index=True)
    company = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    type = Column(
        Enum(JobType, name="job_type", values_callable=_enum_values),
        nullable=False,
    )
    status = Column(
        Enum(JobStatus, name="job_status", values_callable=_enum_values),
        nullable=False,
        default=JobStatus.ACTIVE,
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)

    # Owner, a Supabase auth user id
    user_id = Column(String(36), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (Index("ix_job_posts_created_at_id", "created_at", "id"),)

    def __repr__(self):
        return f"<JobPost(id={self.id}, title='{self.title}')>"
