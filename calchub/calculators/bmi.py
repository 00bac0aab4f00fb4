# calchub/calculators/bmi.py
from typing import Dict, Any, List, Tuple
import logging

from calchub.calculators.base import BaseCalculator
from calchub.calculators.waist_to_height import whr_risk, whtr_category, LABELS as RATIO_LABELS
from calchub.core.units import convert_from_base
from calchub.schemas.calculators import (
    CalculatorConfig, CalculatorCategory, CalculatorResult,
    InputField, InputType, ResultField, ResultFormat, Preset,
)

logger = logging.getLogger(__name__)

# (lower bound inclusive, upper bound exclusive, category id)
BMI_CATEGORIES: List[Tuple[float, float, str]] = [
    (0, 16, "severe_thinness"),
    (16, 17, "moderate_thinness"),
    (17, 18.5, "mild_thinness"),
    (18.5, 25, "normal"),
    (25, 30, "overweight"),
    (30, 35, "obese_class_1"),
    (35, 40, "obese_class_2"),
    (40, float("inf"), "obese_class_3"),
]

CATEGORY_LABELS = {
    "severe_thinness": "Severe Thinness",
    "moderate_thinness": "Moderate Thinness",
    "mild_thinness": "Mild Thinness",
    "normal": "Normal",
    "overweight": "Overweight",
    "obese_class_1": "Obese Class I",
    "obese_class_2": "Obese Class II",
    "obese_class_3": "Obese Class III",
}

HEALTHY_BMI_MIN = 18.5
HEALTHY_BMI_MAX = 24.9
ADULT_AGE = 20


class BMICalculator(BaseCalculator):
    config = CalculatorConfig(
        id="bmi",
        category=CalculatorCategory.HEALTH,
        icon="⚖️",
        inputs=[
            InputField(id="gender", type=InputType.RADIO, default="male", options=["male", "female"]),
            InputField(id="age", type=InputType.NUMBER, default=30, min=2, max=120),
            InputField(id="weight", type=InputType.NUMBER, required=True, default=70, min=1, max=700,
                       unit_type="weight", units=["kg", "lbs", "st"], default_unit="kg"),
            InputField(id="height", type=InputType.NUMBER, required=True, default=175, min=30, max=275,
                       unit_type="height", units=["cm", "m", "ft_in", "in"], default_unit="cm"),
            InputField(id="waist", type=InputType.NUMBER, min=1,
                       unit_type="length", units=["cm", "in"], default_unit="cm"),
            InputField(id="hip", type=InputType.NUMBER, min=1,
                       unit_type="length", units=["cm", "in"], default_unit="cm"),
        ],
        results=[
            ResultField(id="bmi", type="primary", format=ResultFormat.NUMBER),
            ResultField(id="category"),
            ResultField(id="healthy_weight_range"),
            ResultField(id="weight_to_healthy"),
            ResultField(id="bmi_prime", format=ResultFormat.NUMBER),
            ResultField(id="ponderal_index", format=ResultFormat.NUMBER),
            ResultField(id="whr", format=ResultFormat.NUMBER),
            ResultField(id="whr_risk"),
            ResultField(id="whtr", format=ResultFormat.NUMBER),
            ResultField(id="whtr_category"),
        ],
        presets=[
            Preset(id="average_male", icon="👨", values={"gender": "male", "age": 35, "weight": 80, "height": 178}),
            Preset(id="average_female", icon="👩", values={"gender": "female", "age": 35, "weight": 65, "height": 163}),
            Preset(id="athlete", icon="🏃", values={"gender": "male", "age": 27, "weight": 88, "height": 185, "waist": 80, "hip": 98}),
        ],
        related=["ideal-weight", "waist-to-height-ratio"],
    )

    @staticmethod
    def determine_category(bmi: float) -> str:
        """
        Determine the BMI category for a BMI value.

        Each range includes its lower bound and excludes its upper bound,
        so 18.5 is ``normal`` and 25 is ``overweight``.

        Args:
            bmi: Body Mass Index.

        Returns:
            Category id, e.g. "normal" or "obese_class_2".
        """
        for lower, upper, category in BMI_CATEGORIES:
            if lower <= bmi < upper:
                return category
        return "severe_thinness"

    @staticmethod
    def healthy_weight_range(height_m: float) -> Tuple[float, float]:
        return HEALTHY_BMI_MIN * height_m ** 2, HEALTHY_BMI_MAX * height_m ** 2

    def _calculate(self, values: Dict[str, Any], units: Dict[str, str], t: Dict[str, Any]) -> CalculatorResult:
        weight_kg = self.in_base_unit(values, units, "weight")
        height_cm = self.in_base_unit(values, units, "height")
        waist_cm = self.optional_in_base_unit(values, units, "waist")
        hip_cm = self.optional_in_base_unit(values, units, "hip")
        gender = self.option(values, "gender")
        age = self.number(values, "age")

        height_m = height_cm / 100
        bmi = weight_kg / (height_m * height_m)
        category = self.determine_category(bmi)

        min_kg, max_kg = self.healthy_weight_range(height_m)
        if weight_kg < min_kg:
            change_kg = min_kg - weight_kg
            direction = "gain"
        elif weight_kg > max_kg:
            change_kg = weight_kg - max_kg
            direction = "lose"
        else:
            change_kg = 0.0
            direction = "maintain"

        # Show weights in the unit the user entered, stones shown as kg
        weight_unit = "lbs" if units.get("weight") == "lbs" else "kg"
        unit_label = self.text(t, weight_unit, weight_unit)
        min_display = convert_from_base(min_kg, weight_unit, "weight")
        max_display = convert_from_base(max_kg, weight_unit, "weight")
        change_display = convert_from_base(change_kg, weight_unit, "weight")

        if direction == "maintain":
            weight_to_healthy = self.text(t, "in_healthy_range", "You are within the healthy range")
        else:
            verb = self.text(t, direction, "Gain" if direction == "gain" else "Lose")
            weight_to_healthy = f"{verb} {change_display:.1f} {unit_label}"

        bmi_prime = bmi / 25
        ponderal_index = weight_kg / height_m ** 3

        result_values: Dict[str, Any] = {
            "bmi": round(bmi, 1),
            "category": category,
            "healthy_weight_min": round(min_display, 1),
            "healthy_weight_max": round(max_display, 1),
            "weight_change": round(change_display, 1),
            "weight_change_direction": direction,
            "bmi_prime": round(bmi_prime, 2),
            "ponderal_index": round(ponderal_index, 1),
        }
        formatted = {
            "bmi": f"{bmi:.1f}",
            "category": self.text(t, category, CATEGORY_LABELS[category]),
            "healthy_weight_range": f"{min_display:.1f} – {max_display:.1f} {unit_label}",
            "weight_to_healthy": weight_to_healthy,
            "bmi_prime": f"{bmi_prime:.2f}",
            "ponderal_index": f"{ponderal_index:.1f} {self.text(t, 'kg_m3', 'kg/m³')}",
        }

        if waist_cm and hip_cm:
            whr = waist_cm / hip_cm
            risk = whr_risk(whr, gender)
            result_values["whr"] = round(whr, 2)
            result_values["whr_risk"] = risk
            formatted["whr"] = f"{whr:.2f}"
            formatted["whr_risk"] = self.text(t, risk, RATIO_LABELS[risk])

        if waist_cm:
            whtr = waist_cm / height_cm
            whtr_cat = whtr_category(whtr, gender)
            result_values["whtr"] = round(whtr, 2)
            result_values["whtr_category"] = whtr_cat
            formatted["whtr"] = f"{whtr:.2f}"
            formatted["whtr_category"] = self.text(t, whtr_cat, RATIO_LABELS[whtr_cat])

        summary = self.template(
            t, "summary",
            "Your BMI is {bmi}, which falls in the {category} category. Healthy weight for your height: {range}.",
            bmi=formatted["bmi"],
            category=formatted["category"],
            range=formatted["healthy_weight_range"],
        )

        return CalculatorResult(
            values=result_values,
            formatted=formatted,
            summary=summary,
            metadata={
                "adult": age >= ADULT_AGE,
                "chart_data": {
                    "value": round(bmi, 1),
                    "scale": [
                        {"id": cat, "min": lower, "max": None if upper == float("inf") else upper}
                        for lower, upper, cat in BMI_CATEGORIES
                    ],
                },
                "table_data": [
                    {
                        "category": self.text(t, cat, CATEGORY_LABELS[cat]),
                        "range": f"{lower} – {upper}" if upper != float("inf") else f"≥ {lower}",
                        "current": cat == category,
                    }
                    for lower, upper, cat in BMI_CATEGORIES
                ],
            },
        )
