import pytest

from calchub.calculators.waist_to_height import (
    WaistToHeightCalculator, whr_risk, whtr_category, whtr_risk_level, years_of_life_lost,
)


class TestWaistToHeightHelpers:
    """Test cases for waist ratio classification."""

    def test_category_depends_on_gender(self):
        """Test women move into the overweight band earlier."""
        assert whtr_category(0.5, "male") == "healthy"
        assert whtr_category(0.5, "female") == "overweight"
        assert whtr_category(0.45, "male") == "slender_healthy"
        assert whtr_category(0.30, "female") == "abnormally_slim"
        assert whtr_category(0.70, "male") == "obese"

    @pytest.mark.parametrize("ratio, age, expected", [
        (0.38, 30, "underweight_risk"),
        (0.45, 30, "low"),
        (0.52, 30, "increased"),
        (0.52, 45, "moderate"),
        (0.52, 55, "low"),
        (0.62, 30, "very_high"),
        (0.70, 60, "high"),
    ])
    def test_risk_is_age_adjusted(self, ratio, age, expected):
        """Test the risk thresholds shift with age."""
        assert whtr_risk_level(ratio, age) == expected

    def test_whr_risk_rounds_ratio(self):
        """Test the waist-to-hip ratio is rounded before comparison."""
        assert whr_risk(0.849, "female") == "high"
        assert whr_risk(0.80, "female") == "moderate"
        assert whr_risk(0.85, "male") == "low"
        assert whr_risk(1.05, "male") == "very_high"

    def test_years_of_life_lost(self):
        """Test the life expectancy ranges."""
        assert years_of_life_lost(0.48) == (0, 0)
        assert years_of_life_lost(0.58) == (3, 7)
        assert years_of_life_lost(0.70) == (12, 20)


class TestWaistToHeightCalculator:
    """Test cases for the waist-to-height calculator."""

    def test_metric_calculation(self):
        """Test a calculation with centimeters."""
        result = WaistToHeightCalculator().calculate(
            {"gender": "female", "age": 30, "waist": 80, "height": 160},
            {"waist": "cm"},
        )
        assert result.is_valid
        assert result.values["whtr"] == 0.5
        assert result.values["category"] == "overweight"
        assert result.values["risk_level"] == "increased"
        assert result.values["target_waist"] == 80.0
        assert result.values["waist_to_lose"] == 0.0
        assert result.values["whr"] is None
        assert result.formatted["years_of_life_lost"] == "0–1 years"
        assert result.formatted["target_waist"] == "80.0 cm"

    def test_inches_are_the_default_waist_unit(self):
        """Test the at-risk preset measured in inches."""
        result = WaistToHeightCalculator().calculate(
            {"gender": "male", "age": 45, "waist": 42, "height": 175, "hip": 40}
        )
        assert result.values["category"] == "extremely_overweight"
        assert result.values["risk_level"] == "high"
        assert result.values["whr_risk"] == "very_high"
        assert result.formatted["target_waist"].endswith("in")

    def test_age_is_required(self):
        """Test a missing age gives an invalid result."""
        result = WaistToHeightCalculator().calculate({"gender": "male", "waist": 34, "height": 175})
        assert result.is_valid is False

    @pytest.mark.parametrize("age, valid", [
        (17, False), (18, True), (100, True), (101, False),
    ])
    def test_age_range(self, age, valid):
        """Test the age must lie between 18 and 100."""
        result = WaistToHeightCalculator().calculate({"gender": "male", "age": age, "waist": 34, "height": 175})
        assert result.is_valid is valid

    def test_unknown_gender_is_invalid(self):
        """Test a gender outside the options is rejected."""
        result = WaistToHeightCalculator().calculate({"gender": "other", "age": 30, "waist": 34, "height": 175})
        assert result.is_valid is False
