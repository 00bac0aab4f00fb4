# calchub/calculators/emergency_fund.py
from typing import Dict, Any, List
import logging
import math

from calchub.calculators.base import BaseCalculator, InvalidInput
from calchub.schemas.calculators import (
    CalculatorConfig, CalculatorCategory, CalculatorResult,
    InputField, InputType, ResultField, ResultFormat, Preset,
)

logger = logging.getLogger(__name__)

EXPENSE_FIELDS = [
    "housing_expense",
    "utilities_expense",
    "food_expense",
    "transport_expense",
    "insurance_expense",
    "debt_payments",
    "other_expenses",
]

BASE_MONTHS = 6
MIN_MONTHS = 3
MAX_MONTHS = 12
TIMELINE_MAX_MONTHS = 24

INCOME_ADJUSTMENTS = {
    "stable": 0,
    "variable": 2,
    "contract": 2,
    "self_employed": 4,
    "multiple_jobs": -1,
}

INDUSTRY_ADJUSTMENTS = {
    "very_stable": -1,
    "stable": 0,
    "moderate": 1,
    "volatile": 2,
    "seasonal": 2,
}

DEPENDENT_ADJUSTMENTS = {
    "0": 0,
    "1": 1,
    "2": 1,
    "3": 2,
    "4plus": 3,
}

RISK_LABELS = {
    "low": "Low Risk",
    "moderate": "Moderate Risk",
    "elevated": "Elevated Risk",
    "high": "High Risk",
}


def months_of_coverage(income_type: str, industry: str, dependents: str, dual_income: bool) -> int:
    """
    Recommended months of expenses to hold, clamped to 3-12.

    Starts at six months and adds or removes months for income stability,
    industry volatility, dependents and a second household income.
    """
    months = BASE_MONTHS
    months += INCOME_ADJUSTMENTS.get(income_type, 0)
    months += INDUSTRY_ADJUSTMENTS.get(industry, 0)
    months += DEPENDENT_ADJUSTMENTS.get(dependents, 0)
    if dual_income:
        months -= 1
    return max(MIN_MONTHS, min(MAX_MONTHS, months))


def risk_level(months: int) -> str:
    if months <= 4:
        return "low"
    elif months <= 6:
        return "moderate"
    elif months <= 9:
        return "elevated"
    return "high"


def money(amount: float) -> str:
    if amount == int(amount):
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


class EmergencyFundCalculator(BaseCalculator):
    config = CalculatorConfig(
        id="emergency-fund",
        category=CalculatorCategory.FINANCE,
        icon="🛟",
        inputs=[
            InputField(id="housing_expense", type=InputType.CURRENCY, required=True, default=1500, min=0, step=50),
            InputField(id="utilities_expense", type=InputType.CURRENCY, default=200, min=0, step=10),
            InputField(id="food_expense", type=InputType.CURRENCY, default=600, min=0, step=10),
            InputField(id="transport_expense", type=InputType.CURRENCY, default=400, min=0, step=10),
            InputField(id="insurance_expense", type=InputType.CURRENCY, default=300, min=0, step=10),
            InputField(id="debt_payments", type=InputType.CURRENCY, default=0, min=0, step=10),
            InputField(id="other_expenses", type=InputType.CURRENCY, default=200, min=0, step=10),
            InputField(id="income_type", type=InputType.SELECT, required=True, default="stable",
                       options=list(INCOME_ADJUSTMENTS)),
            InputField(id="industry_risk", type=InputType.SELECT, required=True, default="stable",
                       options=list(INDUSTRY_ADJUSTMENTS)),
            InputField(id="dependents", type=InputType.SELECT, required=True, default="0",
                       options=list(DEPENDENT_ADJUSTMENTS)),
            InputField(id="dual_income", type=InputType.RADIO, required=True, default="single",
                       options=["single", "dual"]),
            InputField(id="current_savings", type=InputType.CURRENCY, default=5000, min=0, max=1000000, step=100),
            InputField(id="monthly_savings", type=InputType.CURRENCY, default=500, min=0, max=20000, step=50),
        ],
        results=[
            ResultField(id="recommended_fund", type="primary", format=ResultFormat.CURRENCY),
            ResultField(id="months_recommended"),
            ResultField(id="monthly_expenses", format=ResultFormat.CURRENCY),
            ResultField(id="risk_level"),
            ResultField(id="current_progress"),
            ResultField(id="amount_needed", format=ResultFormat.CURRENCY),
            ResultField(id="time_to_goal"),
            ResultField(id="minimum_fund", format=ResultFormat.CURRENCY),
        ],
        presets=[
            Preset(id="single_renter", icon="🏠", values={
                "housing_expense": 1200, "utilities_expense": 150, "food_expense": 400, "transport_expense": 300,
                "insurance_expense": 150, "debt_payments": 200, "other_expenses": 150, "income_type": "stable",
                "industry_risk": "stable", "dependents": "0", "dual_income": "single",
                "current_savings": 3000, "monthly_savings": 400,
            }),
            Preset(id="family_freelancer", icon="👨‍👩‍👧", values={
                "housing_expense": 2200, "utilities_expense": 300, "food_expense": 900, "transport_expense": 500,
                "insurance_expense": 600, "debt_payments": 400, "other_expenses": 300, "income_type": "self_employed",
                "industry_risk": "volatile", "dependents": "2", "dual_income": "single",
                "current_savings": 10000, "monthly_savings": 800,
            }),
        ],
        related=[],
    )

    def _calculate(self, values: Dict[str, Any], units: Dict[str, str], t: Dict[str, Any]) -> CalculatorResult:
        expenses = [self.number(values, key, 0.0) for key in EXPENSE_FIELDS]
        monthly_expenses = sum(expenses)
        if monthly_expenses <= 0:
            raise InvalidInput("monthly expenses must be greater than zero")

        income_type = self.option(values, "income_type")
        industry = self.option(values, "industry_risk")
        dependents = self.option(values, "dependents")
        dual_income = self.option(values, "dual_income") == "dual"
        current_savings = self.number(values, "current_savings", 0.0)
        monthly_savings = self.number(values, "monthly_savings", 0.0)

        months = months_of_coverage(income_type, industry, dependents, dual_income)
        recommended = monthly_expenses * months
        minimum = monthly_expenses * MIN_MONTHS
        needed = max(0.0, recommended - current_savings)
        progress = min(100, round(current_savings / recommended * 100))
        risk = risk_level(months)

        months_word = self.text(t, "months", "months")
        months_to_goal = math.ceil(needed / monthly_savings) if needed > 0 and monthly_savings > 0 else 0
        if needed <= 0:
            time_to_goal = self.text(t, "already_funded", "Already funded!")
        elif monthly_savings <= 0:
            time_to_goal = self.text(t, "set_savings", "Set a savings amount to see timeline")
        elif months_to_goal <= 12:
            time_to_goal = f"{months_to_goal} {months_word}"
        else:
            years, remaining = divmod(months_to_goal, 12)
            year_word = self.text(t, "year" if years == 1 else "years", "year" if years == 1 else "years")
            time_to_goal = f"{years} {year_word}, {remaining} {months_word}" if remaining else f"{years} {year_word}"

        current_progress = f"{money(current_savings)} ({progress}%)"
        summary = self.template(
            t, "summary",
            "Based on your situation, you need {months} months of coverage ({fund}) in your emergency fund. "
            "You've saved {saved} ({progress}%) so far.",
            months=months,
            fund=money(recommended),
            saved=money(current_savings),
            progress=progress,
        )

        return CalculatorResult(
            values={
                "recommended_fund": recommended,
                "months_recommended": months,
                "monthly_expenses": monthly_expenses,
                "risk_level": risk,
                "progress_percent": progress,
                "amount_needed": needed,
                "months_to_goal": months_to_goal,
                "minimum_fund": minimum,
            },
            formatted={
                "recommended_fund": money(recommended),
                "months_recommended": f"{months} {months_word}",
                "monthly_expenses": money(monthly_expenses),
                "risk_level": self.text(t, risk, RISK_LABELS[risk]),
                "current_progress": current_progress,
                "amount_needed": money(needed),
                "time_to_goal": time_to_goal,
                "minimum_fund": money(minimum),
            },
            summary=summary,
            metadata={
                "table_data": self.savings_timeline(
                    current_savings, monthly_savings, monthly_expenses, recommended, months, t
                ),
                "risk_factors": {
                    "income_type": income_type,
                    "industry_risk": industry,
                    "dependents": dependents,
                    "dual_income": dual_income,
                },
            },
        )

    def savings_timeline(
        self,
        current_savings: float,
        monthly_savings: float,
        monthly_expenses: float,
        recommended: float,
        months: int,
        t: Dict[str, Any],
    ) -> List[Dict[str, str]]:
        """Month by month balance until the goal is reached, capped at two years."""
        if monthly_savings <= 0:
            return []
        needed = max(0.0, recommended - current_savings)
        months_to_goal = math.ceil(needed / monthly_savings)
        month_word = self.text(t, "month", "Month")
        months_word = self.text(t, "months", "months")

        rows = []
        running_total = current_savings
        for month in range(min(months_to_goal, TIMELINE_MAX_MONTHS) + 1):
            rows.append({
                "month": self.text(t, "current", "Current") if month == 0 else f"{month_word} {month}",
                "saved_total": money(running_total),
                "progress": f"{min(100, round(running_total / recommended * 100))}%",
                "months_covered": f"{running_total / monthly_expenses:.1f} {months_word}",
            })
            running_total += monthly_savings
            if running_total >= recommended:
                if month < months_to_goal:
                    rows.append({
                        "month": f"{month_word} {month + 1}",
                        "saved_total": money(recommended),
                        "progress": "100%",
                        "months_covered": f"{months} {months_word}",
                    })
                break
        return rows
