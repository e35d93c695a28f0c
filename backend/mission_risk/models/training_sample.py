"""
Labeled training sample model.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from mission_risk.db.database import Base


class TrainingSample(Base):
    """
    Model for storing labeled estimator training samples.

    Attributes:
        id: Primary key
        features: 8-element feature vector
        target: Target risk in [0, 1]
        source: "assessment" for samples recorded from assessments, "manual" otherwise
        assessment_id: Originating assessment, if any
    """
    __tablename__ = "training_samples"

    id = Column(Integer, primary_key=True, index=True)
    features = Column(JSON, nullable=False)
    target = Column(Float, nullable=False)
    source = Column(String(50), nullable=False, default="manual")

    assessment_id = Column(Integer, ForeignKey("assessments.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)

    assessment = relationship("AssessmentRecord", back_populates="training_samples")

    def __repr__(self) -> str:
        return f"<TrainingSample(id={self.id}, target={self.target}, source='{self.source}')>"
