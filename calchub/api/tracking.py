from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from calchub.auth.auth import get_optional_user_id
from calchub.calculators.registry import CALCULATORS
from calchub.core.config import settings
from calchub.core.translations import resolve_locale
from calchub.db.database import get_db
from calchub.models.models import TrackingEvent
from calchub.schemas.schemas import TrackRequest, TrackResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/track", response_model=TrackResponse, status_code=status.HTTP_202_ACCEPTED)
async def track_event(
    event: TrackRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a usage event for a calculator.

    Anonymous requests are accepted. A storage failure is logged and reported
    as "dropped" so tracking never breaks the page that sent it.
    """
    if event.calculator_id not in CALCULATORS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calculator not found")

    if not settings.TRACKING_ENABLED:
        return TrackResponse(status="ignored")

    db.add(TrackingEvent(
        calculator_id=event.calculator_id,
        event=event.event.value,
        locale=resolve_locale(event.locale),
        user_id=user_id,
        properties=event.properties or None,
    ))
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to store {event.event.value} event for {event.calculator_id}: {e}")
        return TrackResponse(status="dropped")

    return TrackResponse(status="recorded")
