from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from calchub.auth.auth import get_current_user_id
from calchub.calculators.registry import CalculatorNotFoundError, run_calculation
from calchub.core.config import settings
from calchub.db.database import get_db
from calchub.models.models import HistoryEntry
from calchub.schemas.schemas import HistoryCreate, HistoryResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/history", response_model=HistoryResponse, status_code=status.HTTP_201_CREATED)
async def save_history(
    entry: HistoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Save a calculation to the user's history.

    Results are recomputed from the submitted inputs rather than trusted from
    the client. Only the newest HISTORY_MAX_ENTRIES entries are kept per user.
    """
    try:
        result, locale = run_calculation(entry.calculator_id, entry.values, entry.units, entry.locale)
    except CalculatorNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calculator not found")
    if not result.is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Calculation inputs are not valid")

    db_entry = HistoryEntry(
        user_id=user_id,
        calculator_id=entry.calculator_id,
        locale=locale,
        inputs={"values": entry.values, "units": entry.units},
        results={
            "values": result.values,
            "formatted": result.formatted,
            "summary": result.summary,
        },
    )
    db.add(db_entry)
    await db.flush()

    # Drop the oldest entries beyond the per-user limit
    stale_ids = (
        select(HistoryEntry.id)
        .where(HistoryEntry.user_id == user_id)
        .order_by(HistoryEntry.created_at.desc())
        .offset(settings.HISTORY_MAX_ENTRIES)
    )
    stale = (await db.execute(stale_ids)).scalars().all()
    if stale:
        await db.execute(delete(HistoryEntry).where(HistoryEntry.id.in_(stale)))
        logger.info(f"Trimmed {len(stale)} history entries for user {user_id}")

    await db.commit()
    await db.refresh(db_entry)
    return db_entry


@router.get("/history", response_model=List[HistoryResponse])
async def get_history(
    calculator_id: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Most recent calculations first."""
    page_size = min(limit or settings.HISTORY_PAGE_SIZE, settings.HISTORY_MAX_ENTRIES)
    query = select(HistoryEntry).where(HistoryEntry.user_id == user_id)
    if calculator_id:
        query = query.where(HistoryEntry.calculator_id == calculator_id)
    query = query.order_by(HistoryEntry.created_at.desc()).limit(page_size)

    result = await db.execute(query)
    return result.scalars().all()
