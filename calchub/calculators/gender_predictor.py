# calchub/calculators/gender_predictor.py
from datetime import date
from typing import Dict, Any, List
import logging

from calchub.calculators.base import BaseCalculator
from calchub.calculators.lunar import solar_to_lunar, zodiac, MIN_YEAR, MAX_YEAR
from calchub.schemas.calculators import (
    CalculatorConfig, CalculatorCategory, CalculatorResult,
    InputField, InputType, ResultField, Preset,
)

logger = logging.getLogger(__name__)

MIN_LUNAR_AGE = 18
MAX_LUNAR_AGE = 45

# Qing dynasty chart. Row = lunar age 18..45, column = lunar month 1..12, 1 = boy
GENDER_CHART = [
    [1, 0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1],  # 18
    [1, 1, 1, 0, 0, 1, 1, 1, 0, 1, 0, 0],  # 19
    [0, 1, 0, 1, 1, 1, 1, 1, 1, 0, 1, 1],  # 20
    [1, 0, 0, 1, 0, 0, 0, 0, 0, 0, 1, 0],  # 21
    [0, 1, 1, 0, 1, 0, 0, 1, 0, 0, 0, 0],  # 22
    [1, 1, 0, 1, 1, 0, 0, 0, 1, 1, 1, 0],  # 23
    [1, 0, 1, 0, 1, 1, 0, 0, 1, 0, 0, 1],  # 24
    [0, 1, 0, 1, 0, 0, 1, 0, 1, 1, 1, 0],  # 25
    [1, 0, 1, 0, 1, 0, 0, 1, 0, 1, 1, 1],  # 26
    [0, 1, 0, 1, 0, 1, 0, 0, 0, 1, 1, 0],  # 27
    [1, 0, 1, 0, 0, 0, 1, 0, 0, 1, 0, 1],  # 28
    [0, 0, 0, 1, 1, 1, 0, 1, 1, 0, 0, 1],  # 29
    [1, 1, 0, 0, 1, 0, 1, 1, 0, 0, 1, 0],  # 30
    [1, 1, 0, 0, 1, 0, 1, 0, 0, 1, 1, 1],  # 31
    [1, 0, 1, 1, 0, 1, 0, 1, 0, 0, 1, 0],  # 32
    [0, 1, 0, 0, 1, 0, 1, 0, 1, 0, 0, 1],  # 33
    [1, 0, 1, 0, 0, 1, 0, 1, 0, 0, 1, 0],  # 34
    [1, 0, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1],  # 35
    [0, 1, 0, 0, 1, 0, 1, 0, 1, 0, 1, 0],  # 36
    [1, 0, 1, 0, 0, 1, 0, 0, 1, 1, 0, 0],  # 37
    [0, 1, 0, 1, 0, 0, 1, 0, 0, 1, 0, 1],  # 38
    [1, 0, 1, 0, 1, 0, 0, 1, 0, 0, 0, 1],  # 39
    [0, 1, 0, 1, 0, 1, 0, 0, 1, 0, 0, 1],  # 40
    [1, 0, 1, 0, 0, 0, 1, 0, 0, 1, 0, 0],  # 41
    [0, 1, 0, 1, 0, 0, 0, 1, 0, 0, 1, 0],  # 42
    [1, 0, 1, 0, 1, 0, 0, 0, 0, 1, 0, 1],  # 43
    [1, 0, 1, 0, 1, 0, 1, 0, 0, 0, 0, 1],  # 44
    [1, 1, 0, 1, 0, 1, 0, 1, 0, 0, 1, 0],  # 45
]

MONTH_KEYS = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]
MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def lunar_age(birth_year: int, birth_month: int, conception_year: int, conception_month: int) -> int:
    """
    Mother's lunar age at conception, clamped to the chart's 18-45 range.

    Both dates are taken at the 15th of the month.
    """
    birth = solar_to_lunar(birth_year, birth_month, 15)
    conception = solar_to_lunar(conception_year, conception_month, 15)
    age = conception.year - birth.year + 1
    return min(max(age, MIN_LUNAR_AGE), MAX_LUNAR_AGE)


def lunar_month(year: int, month: int) -> int:
    return solar_to_lunar(year, month, 15).month


def predict_gender(age: int, month: int) -> str:
    """Chart lookup. Out of range coordinates read as "girl"."""
    age_index = age - MIN_LUNAR_AGE
    month_index = month - 1
    if not (0 <= age_index < len(GENDER_CHART) and 0 <= month_index < 12):
        return "girl"
    return "boy" if GENDER_CHART[age_index][month_index] == 1 else "girl"


class GenderPredictorCalculator(BaseCalculator):
    config = CalculatorConfig(
        id="chinese-gender-predictor",
        category=CalculatorCategory.HEALTH,
        icon="🏮",
        inputs=[
            InputField(id="mode", type=InputType.RADIO, default="predict", options=["predict", "plan"]),
            InputField(id="birth_year", type=InputType.NUMBER, required=True, min=MIN_YEAR + 1, max=MAX_YEAR - 1, step=1),
            InputField(id="birth_month", type=InputType.SELECT, default="1", options=[str(m) for m in range(1, 13)]),
            InputField(id="conception_year", type=InputType.NUMBER, min=MIN_YEAR + 1, max=MAX_YEAR - 1, step=1,
                       show_when={"mode": ["predict"]}),
            InputField(id="conception_month", type=InputType.SELECT, default="6", options=[str(m) for m in range(1, 13)],
                       show_when={"mode": ["predict"]}),
            InputField(id="plan_year", type=InputType.NUMBER, min=MIN_YEAR + 1, max=MAX_YEAR - 1, step=1,
                       show_when={"mode": ["plan"]}),
            InputField(id="preferred_gender", type=InputType.RADIO, default="boy", options=["boy", "girl"],
                       show_when={"mode": ["plan"]}),
        ],
        results=[
            ResultField(id="prediction", type="primary"),
            ResultField(id="lunar_age"),
            ResultField(id="lunar_month"),
            ResultField(id="zodiac"),
            ResultField(id="best_months"),
            ResultField(id="accuracy"),
        ],
        presets=[
            Preset(id="young_mother", icon="👩", values={"mode": "predict", "birth_year": 2000, "birth_month": "5",
                                                         "conception_year": 2025, "conception_month": "3"}),
            Preset(id="plan_for_girl", icon="👧", values={"mode": "plan", "birth_year": 1994, "birth_month": "9",
                                                          "plan_year": 2026, "preferred_gender": "girl"}),
        ],
        related=["ovulation"],
    )

    @staticmethod
    def chart_table(t: Dict[str, Any]) -> List[Dict[str, str]]:
        boy = BaseCalculator.text(t, "boy", "Boy")
        girl = BaseCalculator.text(t, "girl", "Girl")
        rows = []
        for index, row in enumerate(GENDER_CHART):
            entry = {"age": str(MIN_LUNAR_AGE + index)}
            for month, value in enumerate(row, start=1):
                entry[f"m{month}"] = f"👦 {boy}" if value == 1 else f"👧 {girl}"
            rows.append(entry)
        return rows

    def _year(self, values: Dict[str, Any], key: str) -> int:
        number = self.to_float(values.get(key))
        if number is None:
            return date.today().year
        return int(self.check_range(key, number))

    def _calculate(self, values: Dict[str, Any], units: Dict[str, str], t: Dict[str, Any]) -> CalculatorResult:
        birth_year = int(self.require(values, "birth_year"))
        birth_month = int(self.option(values, "birth_month"))
        mode = self.option(values, "mode")

        months = [self.text(t, key, label) for key, label in zip(MONTH_KEYS, MONTH_LABELS)]
        boy = self.text(t, "boy", "Boy")
        girl = self.text(t, "girl", "Girl")
        years = self.text(t, "years", "years")
        lunar = self.text(t, "lunar", "lunar")
        common_formatted = {
            "accuracy": self.text(t, "accuracy", "~50% (entertainment only)"),
        }
        table_data = self.chart_table(t)

        if mode == "plan":
            plan_year = self._year(values, "plan_year")
            preferred = self.option(values, "preferred_gender")
            best_months = []
            chart_data = []
            for month in range(1, 13):
                prediction = predict_gender(
                    lunar_age(birth_year, birth_month, plan_year, month),
                    lunar_month(plan_year, month),
                )
                if prediction == preferred:
                    best_months.append(month)
                chart_data.append({
                    "month": months[month - 1],
                    "boy": 1 if prediction == "boy" else 0,
                    "girl": 1 if prediction == "girl" else 0,
                })

            sample_age = lunar_age(birth_year, birth_month, plan_year, 6)
            animal, icon = zodiac(plan_year + 1)
            gender_label = boy if preferred == "boy" else girl
            emoji = "👦" if preferred == "boy" else "👧"
            best_text = ", ".join(months[m - 1] for m in best_months) or self.text(t, "none_found", "None found")

            return CalculatorResult(
                values={
                    "mode": "plan",
                    "prediction": preferred,
                    "lunar_age": sample_age,
                    "lunar_month": None,
                    "zodiac": animal,
                    "best_months": best_months,
                },
                formatted={
                    "prediction": f"{emoji} {self.text(t, 'planning_for', 'Planning for')} {gender_label}",
                    "lunar_age": f"~{sample_age} {years} ({lunar})",
                    "lunar_month": self.text(t, "all_months_checked", "All months checked"),
                    "zodiac": f"{icon} {self.text(t, animal, animal.capitalize())} "
                              f"({self.text(t, 'if_born', 'if born')} {plan_year + 1})",
                    "best_months": f"{emoji} {best_text}",
                    **common_formatted,
                },
                summary=self.template(
                    t, "plan_summary",
                    "Best months for a {gender} in {year}: {months}",
                    gender=gender_label, year=plan_year, months=best_text,
                ),
                metadata={"chart_data": chart_data, "table_data": table_data},
            )

        conception_year = self._year(values, "conception_year")
        conception_month = int(self.option(values, "conception_month"))

        age = lunar_age(birth_year, birth_month, conception_year, conception_month)
        month = lunar_month(conception_year, conception_month)
        prediction = predict_gender(age, month)

        # Conception from April onward means a birth in the following year
        expected_birth_year = conception_year + 1 if conception_month >= 4 else conception_year
        animal, icon = zodiac(expected_birth_year)

        gender_label = boy if prediction == "boy" else girl
        emoji = "👦" if prediction == "boy" else "👧"
        chart_data = []
        for m in range(1, 13):
            monthly = predict_gender(age, lunar_month(conception_year, m))
            chart_data.append({
                "month": months[m - 1],
                "boy": 1 if monthly == "boy" else 0,
                "girl": 1 if monthly == "girl" else 0,
            })

        return CalculatorResult(
            values={
                "mode": "predict",
                "prediction": prediction,
                "lunar_age": age,
                "lunar_month": month,
                "zodiac": animal,
                "expected_birth_year": expected_birth_year,
                "best_months": [],
            },
            formatted={
                "prediction": f"{emoji} {gender_label}",
                "lunar_age": f"{age} {years} ({lunar})",
                "lunar_month": f"{self.text(t, 'month', 'Month')} {month}",
                "zodiac": f"{icon} {self.text(t, animal, animal.capitalize())}",
                "best_months": "—",
                **common_formatted,
            },
            summary=self.template(t, "summary", "Prediction: {value}", value=f"{emoji} {gender_label}"),
            metadata={"chart_data": chart_data, "table_data": table_data},
        )
