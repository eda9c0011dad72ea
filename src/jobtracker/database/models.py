"""Database and record models for the job tracker."""

from datetime import datetime
from typing import Optional, Dict, Any
from enum import Enum

from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import declarative_base
from pydantic import BaseModel, field_validator


Base = declarative_base()


class ApplicationStatus(str, Enum):
    """Pipeline stages an application can be in."""
    APPLIED = "Applied"
    APPLICATION_VIEWED = "Application Viewed"
    PHONE_SCREEN = "Phone Screen"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    TECHNICAL_INTERVIEW = "Technical Interview"
    FINAL_INTERVIEW = "Final Interview"
    OFFER_RECEIVED = "Offer Received"
    OFFER_ACCEPTED = "Offer Accepted"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"
    FOLLOW_UP_NEEDED = "Follow-up Needed"
    WAITING_RESPONSE = "Waiting Response"

    @classmethod
    def lookup(cls, value: Any) -> Optional["ApplicationStatus"]:
        """Find the stage named by ``value``, ignoring case; None when there is none."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            for status in cls:
                if status.value == text:
                    return status
            for status in cls:
                if status.value.lower() == text.lower() or status.name == text.upper():
                    return status
        return None

    @classmethod
    def parse(cls, value: Any) -> "ApplicationStatus":
        """Map any value to a stage; unknown or empty values become APPLIED."""
        return cls.lookup(value) or cls.APPLIED


DEFAULT_STATUS = ApplicationStatus.APPLIED


# SQLAlchemy Models (Database Tables)

class KeyValueModel(Base):
    """One serialized value of the local key/value surface."""

    __tablename__ = "local_storage"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<KeyValueModel(key='{self.key}', size={len(self.value or '')})>"


# Pydantic Models (Records and Transfer Objects)

class ApplicationRecord(BaseModel):
    """A job application as held by the record store."""
    id: int
    company: str
    position: str
    date: str = ""
    status: ApplicationStatus = DEFAULT_STATUS
    source: str = ""
    notes: str = ""
    salary: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v):
        return ApplicationStatus.parse(v)

    @field_validator("company", "position", "date", "source", "notes", "salary", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    def to_dict(self) -> Dict[str, Any]:
        """Row-shape dictionary used for local storage and JSON export."""
        return {
            "id": self.id,
            "company": self.company,
            "position": self.position,
            "date": self.date,
            "status": self.status.value,
            "source": self.source,
            "notes": self.notes,
            "salary": self.salary,
        }

    def content(self) -> Dict[str, str]:
        """The seven synced fields, without the local id."""
        data = self.to_dict()
        data.pop("id")
        return data


class ApplicationCreate(BaseModel):
    """Fields supplied by the add flow; the id is assigned by the client."""
    company: str = ""
    position: str = ""
    date: str = ""
    status: ApplicationStatus = DEFAULT_STATUS
    source: str = ""
    notes: str = ""
    salary: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def require_known_status(cls, v):
        if v is None or v == "":
            return DEFAULT_STATUS
        return _known_status(v)


class ApplicationUpdate(BaseModel):
    """Partial update for an existing record."""
    company: Optional[str] = None
    position: Optional[str] = None
    date: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    source: Optional[str] = None
    notes: Optional[str] = None
    salary: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def require_known_status(cls, v):
        if v is None:
            return None
        return _known_status(v)


def _known_status(value: Any) -> ApplicationStatus:
    status = ApplicationStatus.lookup(value)
    if status is None:
        raise ValueError(f"Invalid status: {value}")
    return status
