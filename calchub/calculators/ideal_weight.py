# calchub/calculators/ideal_weight.py
from typing import Dict, Any, Optional
import logging
import math

from calchub.calculators.base import BaseCalculator
from calchub.core.units import convert_from_base
from calchub.schemas.calculators import (
    CalculatorConfig, CalculatorCategory, CalculatorResult,
    InputField, InputType, ResultField, ResultFormat, Preset,
)

logger = logging.getLogger(__name__)

FRAME_MULTIPLIERS = {
    "small": 0.90,
    "medium": 1.0,
    "large": 1.10,
}

ACTIVITY_MULTIPLIERS = {
    "sedentary": 0.97,
    "light": 0.99,
    "moderate": 1.0,
    "active": 1.02,
    "very_active": 1.05,
}

# healthy_low, healthy_high, overweight threshold, obese threshold
ETHNIC_BMI_THRESHOLDS = {
    "standard": (18.5, 24.9, 25.0, 30.0),
    "asian": (18.5, 22.9, 23.0, 27.5),
    "pacific": (18.5, 24.9, 26.0, 32.0),
}

FORMULA_YEARS = {
    "peterson": "2016",
    "devine": "1974",
    "robinson": "1983",
    "miller": "1983",
    "hamwi": "1964",
    "broca": "1871",
    "lorentz": "1929",
}

STATUS_LABELS = {
    "underweight": "Underweight",
    "normal_weight": "Normal weight",
    "overweight": "Overweight",
    "obese": "Obese",
    "obese_2": "Obese II",
    "obese_3": "Obese III",
}

# Safe rate of weight change used for the timeline
KG_PER_WEEK = 0.75


class IdealWeightCalculator(BaseCalculator):
    config = CalculatorConfig(
        id="ideal-weight",
        category=CalculatorCategory.HEALTH,
        icon="🎯",
        inputs=[
            InputField(id="gender", type=InputType.RADIO, required=True, default="male", options=["male", "female"]),
            InputField(id="height", type=InputType.NUMBER, required=True, default=175, min=100, max=250,
                       unit_type="height", units=["cm", "ft_in", "in"], default_unit="cm"),
            InputField(id="current_weight", type=InputType.NUMBER, min=20, max=400,
                       unit_type="weight", units=["kg", "lbs", "st"], default_unit="kg"),
            InputField(id="body_frame", type=InputType.RADIO, default="medium", options=["small", "medium", "large"]),
            InputField(id="activity_level", type=InputType.SELECT, default="moderate",
                       options=list(ACTIVITY_MULTIPLIERS)),
            InputField(id="target_bmi", type=InputType.NUMBER, default=22, min=18.5, max=30, step=0.5),
            InputField(id="ethnicity", type=InputType.SELECT, default="standard", options=list(ETHNIC_BMI_THRESHOLDS)),
        ],
        results=[
            ResultField(id="ideal_weight", type="primary"),
            ResultField(id="ideal_range"),
            ResultField(id="current_bmi"),
            ResultField(id="bmi_category"),
            ResultField(id="weight_gap"),
            ResultField(id="timeline"),
            ResultField(id="frame_adjusted"),
        ] + [ResultField(id=f"{name}_result") for name in FORMULA_YEARS],
        presets=[
            Preset(id="average_male", icon="👨", values={"gender": "male", "height": 178, "current_weight": 85,
                                                         "body_frame": "medium", "activity_level": "moderate"}),
            Preset(id="average_female", icon="👩", values={"gender": "female", "height": 163, "current_weight": 68,
                                                           "body_frame": "medium", "activity_level": "moderate"}),
            Preset(id="athlete_male", icon="🏋️", values={"gender": "male", "height": 183, "current_weight": 86,
                                                         "body_frame": "large", "activity_level": "very_active",
                                                         "target_bmi": 23}),
            Preset(id="petite_female", icon="🌸", values={"gender": "female", "height": 155, "current_weight": 55,
                                                          "body_frame": "small", "activity_level": "light",
                                                          "target_bmi": 21}),
        ],
        related=["bmi", "waist-to-height-ratio"],
    )

    @staticmethod
    def formulas(height_cm: float, gender: str, target_bmi: float = 22) -> Dict[str, float]:
        """
        Ideal body weight in kilograms from the seven published formulas.

        Devine, Robinson, Miller and Hamwi add a fixed amount per inch over
        five feet; shorter heights get the base value.

        Args:
            height_cm: Height in centimeters.
            gender: "male" or "female".
            target_bmi: BMI used by the Peterson equation.

        Returns:
            Mapping of formula name to weight in kilograms.
        """
        height_m = height_cm / 100
        inches_over_60 = max(0.0, height_cm / 2.54 - 60)
        male = gender == "male"
        return {
            "peterson": 2.2 * target_bmi + 3.5 * target_bmi * (height_m - 1.5),
            "devine": (50.0 if male else 45.5) + 2.3 * inches_over_60,
            "robinson": 52 + 1.9 * inches_over_60 if male else 49 + 1.7 * inches_over_60,
            "miller": 56.2 + 1.41 * inches_over_60 if male else 53.1 + 1.36 * inches_over_60,
            "hamwi": 48.0 + 2.7 * inches_over_60 if male else 45.5 + 2.2 * inches_over_60,
            "broca": (height_cm - 100) * (0.9 if male else 0.85),
            "lorentz": (height_cm - 100) - (height_cm - 150) / (4 if male else 2),
        }

    @staticmethod
    def bmi_status(bmi: float, ethnicity: str = "standard") -> str:
        low, _, overweight, obese = ETHNIC_BMI_THRESHOLDS.get(ethnicity, ETHNIC_BMI_THRESHOLDS["standard"])
        if bmi < low:
            return "underweight"
        elif bmi < overweight:
            return "normal_weight"
        elif bmi < obese:
            return "overweight"
        elif bmi < 35:
            return "obese"
        elif bmi < 40:
            return "obese_2"
        return "obese_3"

    def _calculate(self, values: Dict[str, Any], units: Dict[str, str], t: Dict[str, Any]) -> CalculatorResult:
        gender = self.option(values, "gender")
        height_cm = self.in_base_unit(values, units, "height")
        current_kg = self.optional_in_base_unit(values, units, "current_weight")
        frame = self.option(values, "body_frame")
        activity = self.option(values, "activity_level")
        ethnicity = self.option(values, "ethnicity")
        target_bmi = self.number(values, "target_bmi") or 22

        height_m = height_cm / 100
        estimates = self.formulas(height_cm, gender, target_bmi)
        average_kg = sum(estimates.values()) / len(estimates)
        frame_adjusted_kg = average_kg * FRAME_MULTIPLIERS.get(frame, 1.0)
        ideal_kg = frame_adjusted_kg * ACTIVITY_MULTIPLIERS.get(activity, 1.0)

        healthy_low, healthy_high, _, _ = ETHNIC_BMI_THRESHOLDS[ethnicity]
        healthy_min_kg = healthy_low * height_m ** 2
        healthy_max_kg = healthy_high * height_m ** 2

        weight_unit = units.get("current_weight") or "kg"
        unit_label = self.text(t, weight_unit, weight_unit)

        def display(kg: float) -> float:
            return round(convert_from_base(kg, weight_unit, "weight"), 1)

        def fmt_weight(kg: float) -> str:
            return f"{display(kg)} {unit_label}"

        current_bmi: Optional[float] = None
        status: Optional[str] = None
        gap_kg = 0.0
        weeks = 0
        if current_kg is not None:
            current_bmi = current_kg / height_m ** 2
            status = self.bmi_status(current_bmi, ethnicity)
            gap_kg = current_kg - ideal_kg
            if abs(gap_kg) > 1:
                weeks = math.ceil(abs(gap_kg) / KG_PER_WEEK)

        if current_kg is None:
            gap_text = timeline_text = "—"
        else:
            if abs(gap_kg) <= 2:
                gap_text = self.text(t, "within_range", "You're within your ideal range!")
            else:
                verb = self.text(t, "lose", "lose") if gap_kg > 0 else self.text(t, "gain", "gain")
                gap_text = f"{verb} {fmt_weight(abs(gap_kg))}"
            if weeks > 0:
                timeline_text = f"~{weeks} {self.text(t, 'weeks', 'weeks')}"
            else:
                timeline_text = self.text(t, "already_healthy", "Already at a healthy weight")

        status_text = self.text(t, status, STATUS_LABELS[status]) if status else "—"
        ideal_range = f"{fmt_weight(healthy_min_kg)} – {fmt_weight(healthy_max_kg)}"

        result_values: Dict[str, Any] = {
            "ideal_weight": display(ideal_kg),
            "average_weight": display(average_kg),
            "frame_adjusted": display(frame_adjusted_kg),
            "healthy_weight_min": display(healthy_min_kg),
            "healthy_weight_max": display(healthy_max_kg),
            "current_bmi": round(current_bmi, 1) if current_bmi is not None else None,
            "bmi_category": status,
            "weight_gap": display(abs(gap_kg)) if current_kg is not None else None,
            "timeline": weeks,
        }
        formatted = {
            "ideal_weight": fmt_weight(ideal_kg),
            "ideal_range": ideal_range,
            "current_bmi": f"{current_bmi:.1f}" if current_bmi is not None else "—",
            "bmi_category": status_text,
            "weight_gap": gap_text,
            "timeline": timeline_text,
            "frame_adjusted": fmt_weight(frame_adjusted_kg),
        }
        for name, kg in estimates.items():
            result_values[f"{name}_result"] = display(kg)
            formatted[f"{name}_result"] = fmt_weight(kg)

        summary = self.template(
            t, "summary",
            "Your ideal weight is approximately {ideal}. Healthy range: {range}. Current BMI: {bmi} ({category}).",
            ideal=formatted["ideal_weight"],
            range=ideal_range,
            bmi=formatted["current_bmi"],
            category=status_text,
        )

        return CalculatorResult(
            values=result_values,
            formatted=formatted,
            summary=summary,
            metadata={
                "chart_data": [
                    {"label": name.capitalize(), "weight": display(kg)} for name, kg in estimates.items()
                ],
                "table_data": [
                    {
                        "formula": name.capitalize(),
                        "year": FORMULA_YEARS[name],
                        "weight": fmt_weight(kg),
                        "range": f"{fmt_weight(kg * 0.95)} – {fmt_weight(kg * 1.05)}",
                    }
                    for name, kg in estimates.items()
                ],
            },
        )
