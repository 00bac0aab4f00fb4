# calchub/schemas/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID
from enum import Enum

from calchub.schemas.calculators import CalculatorResult


class TrackingEventType(str, Enum):
    VIEW = "view"
    CALCULATE = "calculate"
    PRESET = "preset"
    SHARE = "share"
    FAVORITE = "favorite"


# Auth
class TokenPayload(BaseModel):
    sub: str
    exp: Optional[int] = None


# Calculators
class CalculatorSummary(BaseModel):
    id: str
    slug: str
    name: str
    subtitle: Optional[str] = None
    category: str
    icon: Optional[str] = None


class LocalizedInput(BaseModel):
    id: str
    type: str
    label: str
    help_text: Optional[str] = None
    required: bool = False
    default: Optional[Any] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    units: List[str] = Field(default_factory=list)
    default_unit: Optional[str] = None
    options: List[Dict[str, str]] = Field(default_factory=list)
    show_when: Optional[Dict[str, List[Any]]] = None


class LocalizedPreset(BaseModel):
    id: str
    label: str
    description: Optional[str] = None
    icon: Optional[str] = None
    values: Dict[str, Any]


class FAQ(BaseModel):
    question: str
    answer: str


class LocalizedCalculator(BaseModel):
    id: str
    slug: str
    locale: str
    is_fallback: bool = False
    available_locales: List[str] = Field(default_factory=list)
    name: str
    subtitle: Optional[str] = None
    category: str
    icon: Optional[str] = None
    seo: Dict[str, str] = Field(default_factory=dict)
    inputs: List[LocalizedInput]
    results: List[Dict[str, str]]
    presets: List[LocalizedPreset] = Field(default_factory=list)
    faqs: List[FAQ] = Field(default_factory=list)
    related: List[str] = Field(default_factory=list)


class CalculateRequest(BaseModel):
    values: Dict[str, Any] = Field(default_factory=dict)
    units: Dict[str, str] = Field(default_factory=dict)
    locale: Optional[str] = None


class CalculateResponse(BaseModel):
    calculator_id: str
    locale: str
    result: CalculatorResult


class PresetValues(BaseModel):
    calculator_id: str
    preset_id: str
    values: Dict[str, Any]
    units: Dict[str, str] = Field(default_factory=dict)


# Favorites
class FavoriteCreate(BaseModel):
    calculator_id: str = Field(..., min_length=1, max_length=100)


class FavoriteResponse(BaseModel):
    id: UUID
    calculator_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# History
class HistoryCreate(BaseModel):
    calculator_id: str = Field(..., min_length=1, max_length=100)
    values: Dict[str, Any] = Field(default_factory=dict)
    units: Dict[str, str] = Field(default_factory=dict)
    locale: Optional[str] = None


class HistoryResponse(BaseModel):
    id: UUID
    calculator_id: str
    locale: str
    inputs: Dict[str, Any]
    results: Dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Tracking
class TrackRequest(BaseModel):
    calculator_id: str = Field(..., min_length=1, max_length=100)
    event: TrackingEventType = TrackingEventType.VIEW
    locale: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class TrackResponse(BaseModel):
    status: str
