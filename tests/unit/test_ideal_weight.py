import pytest

from calchub.calculators.ideal_weight import (
    IdealWeightCalculator, ACTIVITY_MULTIPLIERS, FRAME_MULTIPLIERS,
)
from calchub.core.translations import load_translation


@pytest.fixture
def calculator():
    return IdealWeightCalculator()


class TestIdealWeightFormulas:
    """Test cases for the published ideal weight formulas."""

    def test_seven_formulas(self):
        """Test every formula is present."""
        estimates = IdealWeightCalculator.formulas(175, "male")
        assert list(estimates) == ["peterson", "devine", "robinson", "miller", "hamwi", "broca", "lorentz"]

    def test_devine_male(self):
        """Test Devine adds 2.3 kg per inch over five feet."""
        estimates = IdealWeightCalculator.formulas(175, "male")
        assert estimates["devine"] == pytest.approx(50 + 2.3 * (175 / 2.54 - 60))

    def test_short_height_uses_base_values(self):
        """Test heights under five feet get the base value, never less."""
        estimates = IdealWeightCalculator.formulas(150, "female")
        assert estimates["devine"] == pytest.approx(45.5)
        assert estimates["hamwi"] == pytest.approx(45.5)

    def test_broca_and_lorentz(self):
        """Test the height based formulas."""
        estimates = IdealWeightCalculator.formulas(170, "female")
        assert estimates["broca"] == pytest.approx(70 * 0.85)
        assert estimates["lorentz"] == pytest.approx(70 - 20 / 2)

    def test_peterson_uses_target_bmi(self):
        """Test the Peterson estimate follows the target BMI."""
        low = IdealWeightCalculator.formulas(175, "male", target_bmi=20)["peterson"]
        high = IdealWeightCalculator.formulas(175, "male", target_bmi=24)["peterson"]
        assert high > low

    def test_activity_table(self):
        """Test the activity multipliers."""
        assert ACTIVITY_MULTIPLIERS == {
            "sedentary": 0.97,
            "light": 0.99,
            "moderate": 1.0,
            "active": 1.02,
            "very_active": 1.05,
        }
        assert FRAME_MULTIPLIERS == {"small": 0.90, "medium": 1.0, "large": 1.10}

    @pytest.mark.parametrize("bmi, ethnicity, expected", [
        (18.0, "standard", "underweight"),
        (24.0, "standard", "normal_weight"),
        (24.0, "asian", "overweight"),
        (25.5, "pacific", "normal_weight"),
        (28.0, "asian", "obese"),
        (36.0, "standard", "obese_2"),
        (41.0, "standard", "obese_3"),
    ])
    def test_bmi_status(self, bmi, ethnicity, expected):
        """Test ethnicity specific BMI thresholds."""
        assert IdealWeightCalculator.bmi_status(bmi, ethnicity) == expected


class TestIdealWeightCalculator:
    """Test cases for the ideal weight calculator."""

    def test_average_is_mean_of_formulas(self, calculator):
        """Test the average equals the mean of the seven formulas before adjustment."""
        estimates = IdealWeightCalculator.formulas(178, "male")
        result = calculator.calculate({"gender": "male", "height": 178})

        assert result.is_valid
        assert result.values["average_weight"] == pytest.approx(sum(estimates.values()) / 7, abs=0.051)
        assert result.values["ideal_weight"] == result.values["average_weight"]
        for name, kg in estimates.items():
            assert result.values[f"{name}_result"] == pytest.approx(kg, abs=0.051)

    @pytest.mark.parametrize("frame, factor", [("small", 0.9), ("large", 1.1)])
    def test_frame_adjustment(self, calculator, frame, factor):
        """Test the frame adjustment is exactly plus or minus ten percent."""
        medium = calculator.calculate({"gender": "female", "height": 165})
        adjusted = calculator.calculate({"gender": "female", "height": 165, "body_frame": frame})
        assert adjusted.values["frame_adjusted"] == pytest.approx(medium.values["average_weight"] * factor, abs=0.1)

    def test_activity_adjustment(self, calculator):
        """Test activity scales the frame adjusted weight."""
        moderate = calculator.calculate({"gender": "male", "height": 180})
        very_active = calculator.calculate({"gender": "male", "height": 180, "activity_level": "very_active"})
        assert very_active.values["ideal_weight"] == pytest.approx(moderate.values["ideal_weight"] * 1.05, abs=0.1)

    def test_current_weight_gap_and_timeline(self, calculator):
        """Test the gap to the ideal and the weeks needed at 0.75 kg per week."""
        result = calculator.calculate({"gender": "male", "height": 178, "current_weight": 100})
        ideal = result.values["ideal_weight"]

        assert result.values["current_bmi"] == pytest.approx(31.6, abs=0.05)
        assert result.values["bmi_category"] == "obese"
        assert result.values["weight_gap"] == pytest.approx(100 - ideal, abs=0.1)
        assert result.values["timeline"] > 0
        assert result.formatted["weight_gap"].startswith("lose")
        assert result.formatted["timeline"].endswith("weeks")

    def test_within_ideal_range(self, calculator):
        """Test a weight close to the ideal reports being within range."""
        ideal = calculator.calculate({"gender": "female", "height": 163}).values["ideal_weight"]
        result = calculator.calculate({"gender": "female", "height": 163, "current_weight": ideal})
        assert result.formatted["weight_gap"] == "You're within your ideal range!"
        assert result.values["timeline"] == 0

    def test_without_current_weight(self, calculator):
        """Test the current weight is optional."""
        result = calculator.calculate({"gender": "male", "height": 178})
        assert result.values["current_bmi"] is None
        assert result.formatted["current_bmi"] == "—"
        assert result.formatted["weight_gap"] == "—"

    def test_pounds_display(self, calculator):
        """Test weights are shown in the unit of the current weight."""
        kg = calculator.calculate({"gender": "male", "height": 178, "current_weight": 80})
        lbs = calculator.calculate(
            {"gender": "male", "height": 178, "current_weight": 176.4}, {"current_weight": "lbs"}
        )
        assert lbs.values["ideal_weight"] == pytest.approx(kg.values["ideal_weight"] / 0.453592, abs=0.2)
        assert "lbs" in lbs.formatted["ideal_weight"]

    def test_missing_height_is_invalid(self, calculator):
        """Test height is required."""
        assert calculator.calculate({"gender": "male"}).is_valid is False

    @pytest.mark.parametrize("values", [
        {"gender": "male", "height": 100},
        {"gender": "male", "height": 250},
        {"gender": "male", "height": 178, "target_bmi": 18.5},
        {"gender": "male", "height": 178, "target_bmi": 30},
        {"gender": "male", "height": 178, "current_weight": 20},
        {"gender": "male", "height": 178, "current_weight": 400},
    ])
    def test_range_bounds_are_valid(self, calculator, values):
        """Test values on the declared min and max are accepted."""
        assert calculator.calculate(values).is_valid

    @pytest.mark.parametrize("values, units", [
        ({"gender": "male", "height": 99}, {}),
        ({"gender": "male", "height": 20}, {}),
        ({"gender": "male", "height": 251}, {}),
        ({"gender": "male", "height": 30}, {"height": "in"}),
        ({"gender": "male", "height": 178, "target_bmi": 18}, {}),
        ({"gender": "male", "height": 178, "target_bmi": 31}, {}),
        ({"gender": "male", "height": 178, "current_weight": 19}, {}),
        ({"gender": "male", "height": 178, "current_weight": 900}, {"current_weight": "lbs"}),
    ])
    def test_out_of_range_is_invalid(self, calculator, values, units):
        """Test values outside the declared range give an invalid result."""
        assert calculator.calculate(values, units).is_valid is False

    def test_target_bmi_changes_peterson(self, calculator):
        """Test the target BMI feeds the Peterson formula."""
        default = calculator.calculate({"gender": "male", "height": 178})
        higher = calculator.calculate({"gender": "male", "height": 178, "target_bmi": 25})
        assert higher.values["peterson_result"] > default.values["peterson_result"]

    @pytest.mark.parametrize("key, value", [
        ("gender", "x"),
        ("body_frame", "huge"),
        ("activity_level", "olympic"),
        ("ethnicity", "martian"),
    ])
    def test_unknown_option_is_invalid(self, calculator, key, value):
        """Test select and radio values outside their options are rejected."""
        assert calculator.calculate({"gender": "male", "height": 178, key: value}).is_valid is False

    def test_formula_result_labels(self):
        """Test every formula result has an English label."""
        results = load_translation("ideal-weight", "en").data["results"]
        assert results["peterson_result"]["label"] == "Peterson (2016)"
        assert results["lorentz_result"]["label"] == "Lorentz (1929)"

    def test_table_lists_every_formula(self, calculator):
        """Test the comparison table has one row per formula with its year."""
        result = calculator.calculate({"gender": "male", "height": 178})
        rows = result.metadata["table_data"]
        assert len(rows) == 7
        assert rows[1] == {**rows[1], "formula": "Devine", "year": "1974"}
