from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.dates import utcnow


class Application(Base):
    __tablename__ = "applications"
    # (job_id, applicant_id) is not unique at the DB level; services/lifecycle.py
    # checks for an existing row before inserting.
    __table_args__ = (
        Index("ix_applications_job_applicant", "job_id", "applicant_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    cover_letter = Column(Text, nullable=False)
    resume = Column(String(500), nullable=False)  # URL
    status = Column(String(20), nullable=False, default="pending")
    notes = Column(Text, nullable=True)  # employer-authored
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    job = relationship("Job", back_populates="applications")
    applicant = relationship("User", back_populates="applications")
