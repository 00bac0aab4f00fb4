from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from calchub.auth.auth import get_current_user_id
from calchub.calculators.registry import CALCULATORS
from calchub.db.database import get_db
from calchub.models.models import Favorite
from calchub.schemas.schemas import FavoriteCreate, FavoriteResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/favorites", response_model=List[FavoriteResponse])
async def list_favorites(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(Favorite)
        .where(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc())
    )
    return result.scalars().all()


@router.post("/favorites", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    favorite: FavoriteCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Bookmark a calculator. A calculator can be a favorite only once per user."""
    if favorite.calculator_id not in CALCULATORS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calculator not found")

    existing = await db.execute(
        select(Favorite).where(
            Favorite.user_id == user_id,
            Favorite.calculator_id == favorite.calculator_id
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Calculator is already a favorite")

    db_favorite = Favorite(user_id=user_id, calculator_id=favorite.calculator_id)
    db.add(db_favorite)
    try:
        await db.commit()
    except IntegrityError:
        # Concurrent insert of the same favorite
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Calculator is already a favorite")
    await db.refresh(db_favorite)

    logger.info(f"User {user_id} added favorite {favorite.calculator_id}")
    return db_favorite


@router.delete("/favorites/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    favorite_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(Favorite).where(Favorite.id == favorite_id, Favorite.user_id == user_id)
    )
    db_favorite = result.scalar_one_or_none()
    if db_favorite is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Favorite not found")

    await db.delete(db_favorite)
    await db.commit()
