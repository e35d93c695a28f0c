"""
Risk factor registry endpoints.

Provides endpoints for:
- Risk factor CRUD
- Severity analysis of active risk factors
- Listing risk factors by category
"""
from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from mission_risk.api.deps import publish
from mission_risk.core import events
from mission_risk.core.statistics import risk_factor_summary
from mission_risk.db.crud import risk_factor_crud
from mission_risk.db.database import get_db
from mission_risk.schemas.risk_factor import (
    RiskFactorCreate,
    RiskFactorResponse,
    RiskFactorUpdate,
    RiskSummaryResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/risks", tags=["risks"])


def _payload(risk) -> dict:
    return RiskFactorResponse.model_validate(risk).model_dump()


@router.get("", response_model=List[RiskFactorResponse])
async def get_risks(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Get all risk factors with pagination."""
    try:
        return risk_factor_crud.get_multi(db, skip=skip, limit=limit)
    except Exception as e:
        logger.error(f"Error fetching risks: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch risks: {str(e)}"
        )


@router.get("/analysis/summary", response_model=RiskSummaryResponse)
async def get_risk_summary(db: Session = Depends(get_db)):
    """Severity bands, averages, categories and top risks of active factors."""
    return risk_factor_summary(risk_factor_crud.get_multi(db, limit=None))


@router.get("/category/{category}", response_model=List[RiskFactorResponse])
async def get_risks_by_category(category: str, db: Session = Depends(get_db)):
    """Risk factors in a category (case-insensitive)."""
    return risk_factor_crud.get_by_category(db, category)


@router.get("/{risk_id}", response_model=RiskFactorResponse)
async def get_risk(risk_id: int, db: Session = Depends(get_db)):
    """Get a specific risk factor by ID."""
    risk = risk_factor_crud.get(db, risk_id)
    if not risk:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Risk {risk_id} not found"
        )
    return risk


@router.post("", response_model=RiskFactorResponse, status_code=status.HTTP_201_CREATED)
async def create_risk(request: RiskFactorCreate, db: Session = Depends(get_db)):
    """Create a new risk factor."""
    try:
        risk = risk_factor_crud.create(db, request)
    except Exception as e:
        logger.error(f"Error creating risk: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create risk: {str(e)}"
        )

    publish(events.RISK_CREATED, _payload(risk))
    return risk


@router.put("/{risk_id}", response_model=RiskFactorResponse)
async def update_risk(
    risk_id: int,
    request: RiskFactorUpdate,
    db: Session = Depends(get_db)
):
    """Update an existing risk factor."""
    risk = risk_factor_crud.get(db, risk_id)
    if not risk:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Risk {risk_id} not found"
        )

    try:
        updated = risk_factor_crud.update(db, risk, request)
    except Exception as e:
        logger.error(f"Error updating risk: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update risk: {str(e)}"
        )

    publish(events.RISK_UPDATED, _payload(updated))
    return updated


@router.delete("/{risk_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_risk(risk_id: int, db: Session = Depends(get_db)):
    """Delete a risk factor."""
    risk = risk_factor_crud.get(db, risk_id)
    if not risk:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Risk {risk_id} not found"
        )

    risk_factor_crud.delete(db, risk_id)
    publish(events.RISK_DELETED, {"id": risk_id})
    return None
