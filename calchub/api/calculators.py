from typing import List, Optional
from fastapi import APIRouter, HTTPException, Query, status
import logging

from calchub.calculators.registry import (
    CalculatorNotFoundError, PresetNotFoundError,
    apply_preset, find_calculator, get_calculator, list_calculators,
    localize_config, run_calculation, summarize,
)
from calchub.schemas.calculators import CalculatorCategory
from calchub.schemas.schemas import (
    CalculatorSummary, LocalizedCalculator, CalculateRequest, CalculateResponse, PresetValues,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/calculators", response_model=List[CalculatorSummary])
async def get_calculators(
    category: Optional[CalculatorCategory] = None,
    locale: Optional[str] = Query(None, max_length=20),
):
    """List the calculators of the catalog, optionally for a single category."""
    calculators = list_calculators(category.value if category else None)
    return [summarize(calculator, locale) for calculator in calculators]


@router.get("/calculators/{id_or_slug}", response_model=LocalizedCalculator)
async def get_calculator_config(
    id_or_slug: str,
    locale: Optional[str] = Query(None, max_length=20),
):
    """
    Localized configuration of a calculator.

    The path accepts the calculator id or any of its localized slugs.
    """
    try:
        calculator = find_calculator(id_or_slug, locale)
    except CalculatorNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Calculator '{id_or_slug}' not found")
    return localize_config(calculator, locale)


@router.post("/calculators/{calculator_id}/calculate", response_model=CalculateResponse)
async def calculate(calculator_id: str, request: CalculateRequest):
    """Run a calculation. Invalid inputs give a result with is_valid false, not an error."""
    try:
        result, locale = run_calculation(calculator_id, request.values, request.units, request.locale)
    except CalculatorNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Calculator '{calculator_id}' not found")
    return CalculateResponse(calculator_id=calculator_id, locale=locale, result=result)


@router.get("/calculators/{calculator_id}/presets/{preset_id}", response_model=PresetValues)
async def get_preset(calculator_id: str, preset_id: str):
    try:
        calculator = get_calculator(calculator_id)
        values = apply_preset(calculator.id, preset_id)
    except CalculatorNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Calculator '{calculator_id}' not found")
    except PresetNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Preset '{preset_id}' not found")
    return PresetValues(
        calculator_id=calculator.id,
        preset_id=preset_id,
        values=values,
        units=calculator.config.default_units(),
    )
