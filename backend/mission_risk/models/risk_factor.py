"""
Risk factor registry model.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text
from datetime import datetime
from mission_risk.db.database import Base


class RiskFactor(Base):
    """
    Model for storing operator-maintained mission risk factors.

    Attributes:
        id: Primary key
        name: Risk name
        category: Free-form category (e.g. "Technical", "Medical")
        severity: Severity 0-10
        probability: Probability 0-10
        impact: Impact 0-10
        mitigation: Mitigation plan
        status: ACTIVE or RESOLVED
    """
    __tablename__ = "risk_factors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    severity = Column(Integer, nullable=False)
    probability = Column(Integer, nullable=False)
    impact = Column(Integer, nullable=False, default=0)
    mitigation = Column(Text, nullable=True, default="")
    description = Column(Text, nullable=True, default="")
    status = Column(String(20), nullable=False, default="ACTIVE")

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    def __repr__(self) -> str:
        return f"<RiskFactor(id={self.id}, name='{self.name}', severity={self.severity})>"
