"""
Assessment endpoints.

Provides endpoints for:
- Stored batch assessments (create, read, update notes, delete)
- Assessment statistics
- Estimator retraining, status and labeled training samples

Creating an assessment also records one labeled training sample per
assessed passenger (features -> deterministic overall risk).
"""
from fastapi import APIRouter, HTTPException, status, Depends
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session
from typing import List
import logging

from mission_risk.api.deps import (
    current_estimator,
    get_mission_repository,
    get_person_repository,
    get_trainer,
    publish,
)
from mission_risk.core import events
from mission_risk.core.risk_scorer import batch_assess
from mission_risk.core.statistics import assessment_insights, assessment_overview
from mission_risk.core.trainer import STATUS_COMPLETED
from mission_risk.db.crud import assessment_crud, training_sample_crud
from mission_risk.db.database import get_db
from mission_risk.schemas.assessment import (
    AssessmentCreate,
    AssessmentResponse,
    AssessmentUpdate,
    EstimatorStatusResponse,
    StatisticsOverview,
    TrainingResultResponse,
    TrainingSampleCreate,
    TrainingSampleResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assessments", tags=["assessments"])


@router.get("", response_model=List[AssessmentResponse])
async def get_assessments(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Get all assessments with pagination."""
    try:
        return assessment_crud.get_multi(db, skip=skip, limit=limit)
    except Exception as e:
        logger.error(f"Error fetching assessments: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch assessments: {str(e)}"
        )


@router.get("/statistics/overview", response_model=StatisticsOverview)
async def get_statistics_overview(db: Session = Depends(get_db)):
    """Counts by risk level, mean risk score and mean confidence over stored assessments."""
    records = assessment_crud.get_multi(db, limit=None)
    overview = assessment_overview([r.assessments for r in records])
    overview["recent_assessments"] = assessment_crud.get_recent(db, limit=5)
    return overview


@router.get("/mission/{mission_id}", response_model=List[AssessmentResponse])
async def get_mission_assessments(mission_id: str, db: Session = Depends(get_db)):
    """Stored assessments for one mission."""
    return assessment_crud.get_by_mission(db, mission_id)


@router.post("/ai/retrain", response_model=TrainingResultResponse)
def retrain_estimator(db: Session = Depends(get_db)):
    """Retrain the risk estimator from stored samples, or current missions when none exist."""
    trainer = get_trainer()
    try:
        result = trainer.retrain(
            get_mission_repository().list(),
            get_person_repository().list(),
            training_sample_crud.as_records(db),
        )
    except Exception as e:
        logger.error(f"Error retraining estimator: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrain estimator: {str(e)}"
        )

    if result.status == STATUS_COMPLETED:
        publish(events.AI_MODEL_RETRAINED, {
            "timestamp": result.timestamp,
            "training_data_points": result.training_sample_count,
        })
    return result.to_dict()


@router.get("/ai/status", response_model=EstimatorStatusResponse)
async def get_estimator_status(db: Session = Depends(get_db)):
    """Trained flag, sample counts, last training time and in-progress flag."""
    data = get_trainer().status()
    data["stored_sample_count"] = training_sample_crud.count(db)
    data["stored_assessment_count"] = assessment_crud.count(db)
    return data


@router.get("/ai/training-samples", response_model=List[TrainingSampleResponse])
async def get_training_samples(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Stored labeled training samples."""
    return training_sample_crud.get_multi(db, skip=skip, limit=limit)


@router.post("/ai/training-samples", response_model=TrainingSampleResponse, status_code=status.HTTP_201_CREATED)
async def add_training_sample(request: TrainingSampleCreate, db: Session = Depends(get_db)):
    """Add a labeled training sample."""
    if not all(0.0 <= f <= 1.0 for f in request.features):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Features must be normalized to [0, 1]"
        )
    return training_sample_crud.create(db, {
        "features": request.features,
        "target": request.target,
        "source": "manual",
    })


@router.get("/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(assessment_id: int, db: Session = Depends(get_db)):
    """Get a specific assessment by ID."""
    record = assessment_crud.get(db, assessment_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment {assessment_id} not found"
        )
    return record


@router.post("", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assessment(request: AssessmentCreate, db: Session = Depends(get_db)):
    """Assess passengers against a mission and store the result."""
    mission = get_mission_repository().get(request.mission_id)
    if mission is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Mission {request.mission_id} not found"
        )

    wanted = set(request.passenger_ids)
    people = [p for p in get_person_repository().list() if p.id in wanted]

    try:
        assessments = batch_assess(people, mission, current_estimator())
        insights = assessment_insights(assessments, mission)

        record = assessment_crud.create(db, {
            "mission_id": mission.id,
            "passenger_ids": list(request.passenger_ids),
            "assessment_type": request.assessment_type,
            "assessments": jsonable_encoder([a.to_dict() for a in assessments]),
            "insights": jsonable_encoder(insights),
            "notes": request.notes,
        })

        for assessment in assessments:
            if assessment.degraded:
                continue
            training_sample_crud.create(db, {
                "features": assessment.features,
                "target": assessment.overall_risk,
                "source": "assessment",
                "assessment_id": record.id,
            })
    except Exception as e:
        logger.error(f"Error creating assessment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create assessment: {str(e)}"
        )

    logger.info(f"Stored assessment {record.id} for mission {mission.id} ({len(assessments)} passengers)")
    publish(events.ASSESSMENT_CREATED, AssessmentResponse.model_validate(record).model_dump())
    return record


@router.put("/{assessment_id}", response_model=AssessmentResponse)
async def update_assessment(
    assessment_id: int,
    request: AssessmentUpdate,
    db: Session = Depends(get_db)
):
    """Update the notes or type of an assessment."""
    record = assessment_crud.get(db, assessment_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment {assessment_id} not found"
        )
    return assessment_crud.update(db, record, request)


@router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assessment(assessment_id: int, db: Session = Depends(get_db)):
    """Delete an assessment and the training samples recorded from it."""
    record = assessment_crud.get(db, assessment_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment {assessment_id} not found"
        )

    assessment_crud.delete(db, assessment_id)
    return None
