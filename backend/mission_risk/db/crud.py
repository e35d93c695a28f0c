"""
CRUD operations for database models.
"""
from typing import TypeVar, Generic, Type, List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from pydantic import BaseModel

from mission_risk.models import AssessmentRecord, RiskFactor, TrainingSample

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Base CRUD operations with default methods."""

    def __init__(self, model: Type[ModelType]):
        """
        Initialize CRUD object.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Args:
            db: Database session
            id: Record ID

        Returns:
            Model instance or None
        """
        return db.get(self.model, id)

    def get_multi(
        self,
        db: Session,
        skip: int = 0,
        limit: Optional[int] = 100
    ) -> List[ModelType]:
        """
        Get multiple records with pagination, oldest first.

        Args:
            db: Database session
            skip: Number of records to skip
            limit: Maximum number of records to return; None for all

        Returns:
            List of model instances
        """
        stmt = select(self.model).order_by(self.model.id).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(db.execute(stmt).scalars().all())

    def create(
        self,
        db: Session,
        obj_in: CreateSchemaType | Dict[str, Any]
    ) -> ModelType:
        """
        Create a new record.

        Args:
            db: Database session
            obj_in: Pydantic schema or dict with creation data

        Returns:
            Created model instance
        """
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | Dict[str, Any]
    ) -> ModelType:
        """
        Update an existing record.

        Args:
            db: Database session
            db_obj: Existing model instance
            obj_in: Pydantic schema or dict with update data; unset and
                None values are left unchanged

        Returns:
            Updated model instance
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if value is not None and hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, id: int) -> Optional[ModelType]:
        """
        Delete a record by ID.

        Args:
            db: Database session
            id: Record ID

        Returns:
            Deleted model instance or None
        """
        obj = db.get(self.model, id)
        if obj:
            db.delete(obj)
            db.commit()
        return obj

    def count(self, db: Session) -> int:
        """
        Count total records.

        Args:
            db: Database session

        Returns:
            Number of records
        """
        return db.execute(select(func.count()).select_from(self.model)).scalar_one()


class CRUDAssessment(CRUDBase[AssessmentRecord, BaseModel, BaseModel]):

    def get_by_mission(self, db: Session, mission_id: str) -> List[AssessmentRecord]:
        stmt = select(AssessmentRecord).where(AssessmentRecord.mission_id == mission_id).order_by(AssessmentRecord.id)
        return list(db.execute(stmt).scalars().all())

    def get_recent(self, db: Session, limit: int = 5) -> List[AssessmentRecord]:
        stmt = select(AssessmentRecord).order_by(AssessmentRecord.created_at.desc(), AssessmentRecord.id.desc()).limit(limit)
        return list(db.execute(stmt).scalars().all())


class CRUDRiskFactor(CRUDBase[RiskFactor, BaseModel, BaseModel]):

    def get_by_category(self, db: Session, category: str) -> List[RiskFactor]:
        """Risk factors in a category, compared case-insensitively."""
        stmt = select(RiskFactor).where(func.lower(RiskFactor.category) == category.lower()).order_by(RiskFactor.id)
        return list(db.execute(stmt).scalars().all())


class CRUDTrainingSample(CRUDBase[TrainingSample, BaseModel, BaseModel]):

    def as_records(self, db: Session) -> List[Dict[str, Any]]:
        """All samples as {'features', 'target'} dicts for the trainer."""
        return [
            {"features": s.features, "target": s.target}
            for s in self.get_multi(db, limit=None)
        ]


assessment_crud = CRUDAssessment(AssessmentRecord)
risk_factor_crud = CRUDRiskFactor(RiskFactor)
training_sample_crud = CRUDTrainingSample(TrainingSample)
