"""
Assessment record model.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from mission_risk.db.database import Base


class AssessmentRecord(Base):
    """
    Model for storing batch risk assessments.

    Attributes:
        id: Primary key
        mission_id: Mission the passengers were assessed against
        passenger_ids: Ids of the assessed passengers
        assessment_type: Origin of the assessment (AI_AUTOMATED, MANUAL)
        assessments: Serialized person risk assessments
        insights: Serialized batch insights
        notes: Free text notes
        created_at: Creation timestamp
    """
    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, index=True)
    mission_id = Column(String(64), nullable=False, index=True)
    passenger_ids = Column(JSON, nullable=False, default=list)
    assessment_type = Column(String(50), nullable=False, default="AI_AUTOMATED")

    assessments = Column(JSON, nullable=False, default=list)
    insights = Column(JSON, nullable=False, default=dict)
    notes = Column(Text, nullable=True, default="")

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    training_samples = relationship(
        "TrainingSample", back_populates="assessment", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<AssessmentRecord(id={self.id}, mission_id='{self.mission_id}', passengers={len(self.passenger_ids or [])})>"
