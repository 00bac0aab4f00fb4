# calchub/schemas/calculators.py
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from enum import Enum


class InputType(str, Enum):
    NUMBER = "number"
    SLIDER = "slider"
    RADIO = "radio"
    SELECT = "select"
    CHECKBOX = "checkbox"
    TEXT = "text"
    DATE = "date"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"


class CalculatorCategory(str, Enum):
    HEALTH = "health"
    FINANCE = "finance"
    TECHNOLOGY = "technology"
    EVERYDAY = "everyday"


class ResultFormat(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    PERCENTAGE = "percentage"
    DATE = "date"
    CURRENCY = "currency"
    DURATION = "duration"


class InputField(BaseModel):
    id: str
    type: InputType = InputType.NUMBER
    required: bool = False
    default: Optional[Any] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    unit_type: Optional[str] = None
    units: List[str] = Field(default_factory=list)
    default_unit: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    show_when: Optional[Dict[str, List[Any]]] = None


class ResultField(BaseModel):
    id: str
    type: str = "secondary"
    format: ResultFormat = ResultFormat.TEXT


class Preset(BaseModel):
    id: str
    icon: Optional[str] = None
    values: Dict[str, Any]


class CalculatorConfig(BaseModel):
    id: str
    version: str = "1.0"
    category: CalculatorCategory
    icon: Optional[str] = None
    inputs: List[InputField]
    results: List[ResultField]
    presets: List[Preset] = Field(default_factory=list)
    related: List[str] = Field(default_factory=list)

    def get_input(self, input_id: str) -> Optional[InputField]:
        return next((field for field in self.inputs if field.id == input_id), None)

    def get_preset(self, preset_id: str) -> Optional[Preset]:
        return next((preset for preset in self.presets if preset.id == preset_id), None)

    def default_values(self) -> Dict[str, Any]:
        return {field.id: field.default for field in self.inputs if field.default is not None}

    def default_units(self) -> Dict[str, str]:
        return {field.id: field.default_unit for field in self.inputs if field.default_unit}


class CalculatorResult(BaseModel):
    """Outcome of a single calculation.

    ``values`` keeps raw numbers for charts and further processing,
    ``formatted`` keeps localized display strings keyed the same way.
    """
    values: Dict[str, Any] = Field(default_factory=dict)
    formatted: Dict[str, str] = Field(default_factory=dict)
    summary: str = ""
    is_valid: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def invalid(cls) -> "CalculatorResult":
        return cls(is_valid=False)
