# calchub/calculators/ovulation.py
from datetime import date, timedelta
from typing import Dict, Any, List, Optional
import logging

from calchub.calculators.base import BaseCalculator
from calchub.schemas.calculators import (
    CalculatorConfig, CalculatorCategory, CalculatorResult,
    InputField, InputType, ResultField, ResultFormat, Preset,
)

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Fertility score by offset from the ovulation day of the cycle
FERTILITY_BY_OFFSET = {-5: 10, -4: 16, -3: 25, -2: 55, -1: 80, 0: 65, 1: 15, 2: 5}

FERTILE_DAYS_BEFORE = 5
PEAK_DAYS_BEFORE = 2
IMPLANTATION_START = 6
IMPLANTATION_END = 12
TEST_DAYS_AFTER = 14
# Naegele's rule
PREGNANCY_DAYS = 280
CALENDAR_CYCLES = 6


def ovulation_dates(lmp: date, cycle_length: int, luteal_phase: int) -> Dict[str, date]:
    """
    Calendar-method dates for a single cycle.

    The first day of the last menstrual period is cycle day 1, so ovulation
    falls on ``lmp + (cycle_length - luteal_phase - 1)`` days.
    """
    ovulation_day = cycle_length - luteal_phase
    ovulation = lmp + timedelta(days=ovulation_day - 1)
    return {
        "ovulation": ovulation,
        "fertile_start": ovulation - timedelta(days=FERTILE_DAYS_BEFORE),
        "fertile_end": ovulation,
        "peak_start": ovulation - timedelta(days=PEAK_DAYS_BEFORE),
        "peak_end": ovulation,
        "next_period": lmp + timedelta(days=cycle_length),
        "implantation_start": ovulation + timedelta(days=IMPLANTATION_START),
        "implantation_end": ovulation + timedelta(days=IMPLANTATION_END),
        "pregnancy_test": ovulation + timedelta(days=TEST_DAYS_AFTER),
        "due_date": lmp + timedelta(days=PREGNANCY_DAYS),
    }


def fertility_by_cycle_day(cycle_length: int, luteal_phase: int) -> List[int]:
    ovulation_day = cycle_length - luteal_phase
    return [
        0 if day <= 5 else FERTILITY_BY_OFFSET.get(day - ovulation_day, 0)
        for day in range(1, cycle_length + 1)
    ]


class OvulationCalculator(BaseCalculator):
    config = CalculatorConfig(
        id="ovulation",
        category=CalculatorCategory.HEALTH,
        icon="🌸",
        inputs=[
            InputField(id="lmp_month", type=InputType.SELECT, required=True, default="2",
                       options=[str(m) for m in range(1, 13)]),
            InputField(id="lmp_day", type=InputType.NUMBER, required=True, min=1, max=31, step=1),
            InputField(id="lmp_year", type=InputType.NUMBER, min=1900, max=2100, step=1),
            InputField(id="cycle_length", type=InputType.SLIDER, default=28, min=21, max=45, step=1),
            InputField(id="luteal_phase", type=InputType.SLIDER, default=14, min=10, max=16, step=1),
        ],
        results=[
            ResultField(id="ovulation_date", type="primary", format=ResultFormat.DATE),
            ResultField(id="fertile_window_start", format=ResultFormat.DATE),
            ResultField(id="fertile_window_end", format=ResultFormat.DATE),
            ResultField(id="peak_fertility"),
            ResultField(id="next_period", format=ResultFormat.DATE),
            ResultField(id="implantation_window"),
            ResultField(id="pregnancy_test_date", format=ResultFormat.DATE),
            ResultField(id="due_date_if_conceived", format=ResultFormat.DATE),
        ],
        presets=[
            Preset(id="regular_cycle", icon="📅", values={"cycle_length": 28, "luteal_phase": 14}),
            Preset(id="short_cycle", icon="⏩", values={"cycle_length": 24, "luteal_phase": 13}),
            Preset(id="long_cycle", icon="⏳", values={"cycle_length": 35, "luteal_phase": 14}),
        ],
        related=["chinese-gender-predictor"],
    )

    def format_date(self, t: Dict[str, Any], value: date) -> str:
        month = MONTH_NAMES[value.month - 1]
        short = self.text(t, month[:3].lower(), month[:3])
        return f"{short} {value.day}"

    def format_date_full(self, t: Dict[str, Any], value: date) -> str:
        month = MONTH_NAMES[value.month - 1]
        return f"{self.text(t, f'month_{month.lower()}', month)} {value.day}, {value.year}"

    @staticmethod
    def resolve_lmp(month: int, day: int, year: Optional[int], today: Optional[date] = None) -> date:
        """
        Build the LMP date.

        Without an explicit year the most recent occurrence is used: this year,
        or last year when the date would otherwise be in the future.

        Raises:
            ValueError: for impossible dates such as February 30.
        """
        if year is not None:
            return date(year, month, day)
        today = today or date.today()
        year = today.year
        # Feb 29 may need to walk back to the last leap year
        for _ in range(8):
            try:
                lmp = date(year, month, day)
            except ValueError:
                if (month, day) != (2, 29):
                    raise
                year -= 1
                continue
            if lmp <= today:
                return lmp
            year -= 1
        raise ValueError(f"No valid date for {month}/{day}")

    def _calculate(self, values: Dict[str, Any], units: Dict[str, str], t: Dict[str, Any]) -> CalculatorResult:
        month = int(self.option(values, "lmp_month"))
        day = self.require(values, "lmp_day")
        cycle_length = int(self.number(values, "cycle_length"))
        luteal_phase = int(self.number(values, "luteal_phase"))

        year_value = self.to_float(values.get("lmp_year"))
        year = int(self.check_range("lmp_year", year_value)) if year_value is not None else None
        lmp = self.resolve_lmp(month, int(day), year)

        dates = ovulation_dates(lmp, cycle_length, luteal_phase)
        ovulation_day = cycle_length - luteal_phase

        to_word = self.text(t, "to", "to")
        and_word = self.text(t, "and", "and")
        day_word = self.text(t, "day", "Day")

        def short(key: str) -> str:
            return self.format_date(t, dates[key])

        def full(key: str) -> str:
            return self.format_date_full(t, dates[key])

        formatted = {
            "ovulation_date": full("ovulation"),
            "fertile_window_start": full("fertile_start"),
            "fertile_window_end": full("fertile_end"),
            "peak_fertility": f"{short('peak_start')} {and_word} {short('peak_end')}",
            "next_period": full("next_period"),
            "implantation_window": f"{short('implantation_start')} {to_word} {short('implantation_end')}",
            "pregnancy_test_date": full("pregnancy_test"),
            "due_date_if_conceived": full("due_date"),
            "fertile_window": f"{short('fertile_start')} {to_word} {short('fertile_end')}",
            "ovulation_cycle_day": f"{day_word} {ovulation_day}",
        }

        chart_data = [
            {"day": f"{day_word} {cycle_day}", "fertility": score}
            for cycle_day, score in enumerate(fertility_by_cycle_day(cycle_length, luteal_phase), start=1)
        ]

        table_data = []
        cycle_start = lmp
        for _ in range(CALENDAR_CYCLES):
            cycle = ovulation_dates(cycle_start, cycle_length, luteal_phase)
            month_name = MONTH_NAMES[cycle_start.month - 1]
            table_data.append({
                "month": f"{self.text(t, f'month_{month_name.lower()}', month_name)} {cycle_start.year}",
                "period_start": self.format_date(t, cycle_start),
                "fertile_start": self.format_date(t, cycle["fertile_start"]),
                "peak_days": f"{self.format_date(t, cycle['peak_start'])} – {self.format_date(t, cycle['peak_end'])}",
                "ovulation": self.format_date(t, cycle["ovulation"]),
                "next_period": self.format_date(t, cycle["next_period"]),
                "due_date": self.format_date_full(t, cycle["due_date"]),
            })
            cycle_start = cycle["next_period"]

        summary = self.template(
            t, "summary",
            "Ovulation ~{ovulation}. Fertile window: {fertile_start}–{fertile_end}. Next period: {next_period}.",
            ovulation=formatted["ovulation_date"],
            fertile_start=short("fertile_start"),
            fertile_end=short("fertile_end"),
            next_period=formatted["next_period"],
        )

        return CalculatorResult(
            values={
                "lmp": lmp.isoformat(),
                "ovulation_date": dates["ovulation"].isoformat(),
                "fertile_window_start": dates["fertile_start"].isoformat(),
                "fertile_window_end": dates["fertile_end"].isoformat(),
                "peak_fertility_start": dates["peak_start"].isoformat(),
                "peak_fertility_end": dates["peak_end"].isoformat(),
                "next_period": dates["next_period"].isoformat(),
                "implantation_window_start": dates["implantation_start"].isoformat(),
                "implantation_window_end": dates["implantation_end"].isoformat(),
                "pregnancy_test_date": dates["pregnancy_test"].isoformat(),
                "due_date_if_conceived": dates["due_date"].isoformat(),
                "ovulation_cycle_day": ovulation_day,
            },
            formatted=formatted,
            summary=summary,
            metadata={"chart_data": chart_data, "table_data": table_data},
        )
