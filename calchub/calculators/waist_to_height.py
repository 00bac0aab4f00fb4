# calchub/calculators/waist_to_height.py
from typing import Dict, Any, Tuple, Optional
import logging

from calchub.calculators.base import BaseCalculator, InvalidInput
from calchub.core.units import convert_from_base
from calchub.schemas.calculators import (
    CalculatorConfig, CalculatorCategory, CalculatorResult,
    InputField, InputType, ResultField, ResultFormat, Preset,
)

logger = logging.getLogger(__name__)

# Upper bounds (exclusive) per category, last category is open ended
WHTR_THRESHOLDS = {
    "male": [0.35, 0.43, 0.46, 0.53, 0.58, 0.63],
    "female": [0.35, 0.42, 0.46, 0.49, 0.54, 0.58],
}
WHTR_CATEGORIES = [
    "abnormally_slim",
    "extremely_slim",
    "slender_healthy",
    "healthy",
    "overweight",
    "extremely_overweight",
    "obese",
]

WHR_THRESHOLDS = {
    "male": [0.90, 0.95, 1.0],
    "female": [0.80, 0.85, 0.90],
}
WHR_RISKS = ["low", "moderate", "high", "very_high"]

LABELS = {
    "abnormally_slim": "Abnormally Slim",
    "extremely_slim": "Extremely Slim",
    "slender_healthy": "Slender & Healthy",
    "healthy": "Healthy",
    "overweight": "Overweight",
    "extremely_overweight": "Extremely Overweight",
    "obese": "Obese",
    "underweight_risk": "Underweight Risk",
    "low": "Low",
    "moderate": "Moderate",
    "increased": "Increased",
    "high": "High",
    "very_high": "Very High",
}


def _bucket(value: float, thresholds, labels) -> str:
    for bound, label in zip(thresholds, labels):
        if value < bound:
            return label
    return labels[len(thresholds)]


def whtr_category(ratio: float, gender: str) -> str:
    """Map a waist-to-height ratio to one of seven gender specific categories."""
    thresholds = WHTR_THRESHOLDS["female" if gender == "female" else "male"]
    return _bucket(ratio, thresholds, WHTR_CATEGORIES)


def whtr_risk_level(ratio: float, age: float) -> str:
    """
    Age adjusted health risk for a waist-to-height ratio.

    Args:
        ratio: Waist divided by height.
        age: Age in years.

    Returns:
        Risk id: underweight_risk, low, moderate, increased, high or very_high.
    """
    if ratio < 0.4:
        return "underweight_risk"
    if age < 40:
        return _bucket(ratio, [0.5, 0.55, 0.6], ["low", "increased", "high", "very_high"])
    if age <= 50:
        return _bucket(ratio, [0.5, 0.55, 0.6, 0.65], ["low", "moderate", "increased", "high", "very_high"])
    return _bucket(ratio, [0.55, 0.6, 0.65], ["low", "moderate", "increased", "high"])


def whr_risk(ratio: float, gender: str) -> str:
    """Waist-to-hip ratio risk, using the ratio rounded to two decimals."""
    thresholds = WHR_THRESHOLDS["female" if gender == "female" else "male"]
    return _bucket(round(ratio, 2), thresholds, WHR_RISKS)


def years_of_life_lost(ratio: float) -> Tuple[int, int]:
    """Estimated (low, high) years of life lost for a waist-to-height ratio."""
    if ratio < 0.5:
        return 0, 0
    if ratio < 0.52:
        return 0, 1
    if ratio < 0.56:
        return 1, 3
    if ratio < 0.60:
        return 3, 7
    if ratio < 0.65:
        return 7, 12
    return 12, 20


class WaistToHeightCalculator(BaseCalculator):
    config = CalculatorConfig(
        id="waist-to-height-ratio",
        category=CalculatorCategory.HEALTH,
        icon="📏",
        inputs=[
            InputField(id="gender", type=InputType.RADIO, required=True, default="male", options=["male", "female"]),
            InputField(id="age", type=InputType.NUMBER, required=True, default=35, min=18, max=100),
            InputField(id="waist", type=InputType.NUMBER, required=True, default=34, min=1,
                       unit_type="length", units=["in", "cm"], default_unit="in"),
            InputField(id="height", type=InputType.NUMBER, required=True, default=175, min=1,
                       unit_type="height", units=["ft_in", "cm", "in"], default_unit="cm"),
            InputField(id="hip", type=InputType.NUMBER, min=1,
                       unit_type="length", units=["in", "cm"], default_unit="in"),
        ],
        results=[
            ResultField(id="whtr", type="primary", format=ResultFormat.NUMBER),
            ResultField(id="category"),
            ResultField(id="risk_level"),
            ResultField(id="target_waist", format=ResultFormat.NUMBER),
            ResultField(id="waist_to_lose", format=ResultFormat.NUMBER),
            ResultField(id="whr", format=ResultFormat.NUMBER),
            ResultField(id="whr_risk"),
            ResultField(id="years_of_life_lost"),
        ],
        presets=[
            Preset(id="athletic_male", icon="🏋️", values={"gender": "male", "age": 28, "waist": 31, "height": 178, "hip": 37}),
            Preset(id="average_female", icon="👩", values={"gender": "female", "age": 32, "waist": 30, "height": 165, "hip": 38}),
            Preset(id="overweight_risk", icon="⚠️", values={"gender": "male", "age": 45, "waist": 42, "height": 175, "hip": 40}),
        ],
        related=["bmi", "ideal-weight"],
    )

    def _calculate(self, values: Dict[str, Any], units: Dict[str, str], t: Dict[str, Any]) -> CalculatorResult:
        gender = self.option(values, "gender")
        age = self.require(values, "age")
        waist_cm = self.in_base_unit(values, units, "waist")
        height_cm = self.in_base_unit(values, units, "height")
        hip_cm = self.optional_in_base_unit(values, units, "hip")
        if gender is None:
            raise InvalidInput("gender is required")

        whtr = waist_cm / height_cm
        category = whtr_category(whtr, gender)
        risk = whtr_risk_level(whtr, age)
        target_waist_cm = height_cm * 0.5
        waist_to_lose_cm = max(0.0, waist_cm - target_waist_cm)
        yll_low, yll_high = years_of_life_lost(whtr)

        waist_unit = "cm" if units.get("waist") == "cm" else "in"
        target_waist = convert_from_base(target_waist_cm, waist_unit, "length")
        waist_to_lose = convert_from_base(waist_to_lose_cm, waist_unit, "length")
        unit_label = self.text(t, waist_unit, waist_unit)

        whr: Optional[float] = None
        whr_level: Optional[str] = None
        if hip_cm:
            whr = waist_cm / hip_cm
            whr_level = whr_risk(whr, gender)

        years_label = self.text(t, "years", "years")
        if yll_high == 0:
            yll_text = self.text(t, "minimal", "Minimal")
        else:
            yll_text = f"{yll_low}–{yll_high} {years_label}"

        formatted = {
            "whtr": f"{whtr:.2f}",
            "category": self.text(t, category, LABELS[category]),
            "risk_level": self.text(t, risk, LABELS[risk]),
            "target_waist": f"{target_waist:.1f} {unit_label}",
            "waist_to_lose": f"{waist_to_lose:.1f} {unit_label}",
            "years_of_life_lost": yll_text,
        }
        if whr is not None:
            formatted["whr"] = f"{whr:.2f}"
            formatted["whr_risk"] = self.text(t, whr_level, LABELS[whr_level])

        summary = self.template(
            t, "summary",
            "Your waist-to-height ratio is {whtr} ({category}). Risk level: {risk}. Your target waist is {target}.",
            whtr=formatted["whtr"],
            category=formatted["category"],
            risk=formatted["risk_level"],
            target=formatted["target_waist"],
        )

        return CalculatorResult(
            values={
                "whtr": round(whtr, 3),
                "category": category,
                "risk_level": risk,
                "target_waist": round(target_waist, 1),
                "waist_to_lose": round(waist_to_lose, 1),
                "whr": round(whr, 2) if whr is not None else None,
                "whr_risk": whr_level,
                "years_of_life_lost": [yll_low, yll_high],
            },
            formatted=formatted,
            summary=summary,
            metadata={
                "chart_data": {
                    "scale": [
                        {"id": label, "max": bound}
                        for bound, label in zip(WHTR_THRESHOLDS["female" if gender == "female" else "male"] + [None], WHTR_CATEGORIES)
                    ],
                    "value": round(whtr, 3),
                },
            },
        )
