# calchub/calculators/base.py
from typing import Dict, Any, Optional
import logging
import math

from calchub.core.units import UnitConversionError, convert_to_base
from calchub.schemas.calculators import CalculatorConfig, CalculatorResult

logger = logging.getLogger(__name__)


class InvalidInput(Exception):
    """Raised inside a calculation to short-circuit to an invalid result."""


class _SafeFormatDict(dict):
    def __missing__(self, key):
        return "{" + key + "}"


class BaseCalculator:
    """
    Base class for all calculators.

    Subclasses set ``config`` and implement ``_calculate``. The public
    ``calculate`` never raises for bad input: missing or out-of-range values,
    unknown units and impossible dates all come back as
    ``CalculatorResult.invalid()``.
    """

    config: CalculatorConfig

    @property
    def id(self) -> str:
        return self.config.id

    def calculate(
        self,
        values: Optional[Dict[str, Any]] = None,
        units: Optional[Dict[str, str]] = None,
        t: Optional[Dict[str, Any]] = None,
    ) -> CalculatorResult:
        values = values or {}
        units = {**self.config.default_units(), **(units or {})}
        t = t or {}
        try:
            return self._calculate(values, units, t)
        except (InvalidInput, UnitConversionError) as e:
            logger.debug(f"Invalid input for {self.id}: {e}")
            return CalculatorResult.invalid()
        except (ArithmeticError, ValueError, TypeError) as e:
            logger.warning(f"Error in {self.id} calculation: {str(e)}")
            return CalculatorResult.invalid()

    def _calculate(self, values: Dict[str, Any], units: Dict[str, str], t: Dict[str, Any]) -> CalculatorResult:
        raise NotImplementedError

    # Input helpers

    @staticmethod
    def to_float(value: Any) -> Optional[float]:
        """Coerce a raw input to float; blanks, garbage, NaN and infinity become None."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, str):
            value = value.strip().replace(",", "")
            if not value:
                return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if math.isnan(number) or math.isinf(number):
            return None
        return number

    @staticmethod
    def to_bool(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "on")
        return bool(value)

    def check_range(self, key: str, number: float) -> float:
        """Reject a number outside the min/max declared on the input field."""
        field = self.config.get_input(key)
        if field is None:
            return number
        if field.min is not None and number < field.min:
            raise InvalidInput(f"{key} must be at least {field.min}")
        if field.max is not None and number > field.max:
            raise InvalidInput(f"{key} must be at most {field.max}")
        return number

    def number(self, values: Dict[str, Any], key: str, default: Optional[float] = None) -> Optional[float]:
        number = self.to_float(values.get(key))
        if number is None:
            field = self.config.get_input(key)
            if default is None and field is not None and field.default is not None:
                return self.to_float(field.default)
            return default
        return self.check_range(key, number)

    def require(
        self,
        values: Dict[str, Any],
        key: str,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
        positive: bool = False,
    ) -> float:
        """
        Read a required number.

        Fields without a unit type are also held to their declared min/max.
        Unit-typed fields are checked after conversion, see ``in_base_unit``.
        """
        number = self.to_float(values.get(key))
        if number is None:
            raise InvalidInput(f"{key} is required")
        if positive and number <= 0:
            raise InvalidInput(f"{key} must be greater than zero")
        if minimum is not None and number < minimum:
            raise InvalidInput(f"{key} must be at least {minimum}")
        if maximum is not None and number > maximum:
            raise InvalidInput(f"{key} must be at most {maximum}")
        field = self.config.get_input(key)
        if field is not None and not field.unit_type:
            self.check_range(key, number)
        return number

    @staticmethod
    def _option_text(raw: Any) -> Optional[str]:
        if raw is None or isinstance(raw, bool):
            return None
        if isinstance(raw, float) and raw.is_integer():
            raw = int(raw)
        value = str(raw).strip()
        return value or None

    def option(self, values: Dict[str, Any], key: str) -> Optional[str]:
        """
        Return a select/radio value.

        Numbers are matched by their integer text (7.0 selects "7"). A missing
        value falls back to the field default; a value outside the options
        is invalid.
        """
        field = self.config.get_input(key)
        value = self._option_text(values.get(key))
        if field is None:
            return value
        if value is None:
            return field.default
        if field.options and value not in field.options:
            raise InvalidInput(f"{key} has no option '{value}'")
        return value

    def in_base_unit(self, values: Dict[str, Any], units: Dict[str, str], key: str, positive: bool = True) -> float:
        """Required number converted to the field's base unit and checked against its min/max there."""
        field = self.config.get_input(key)
        number = self.require(values, key, positive=positive)
        if field is None or not field.unit_type:
            return number
        unit = units.get(key) or field.default_unit
        return self.check_range(key, convert_to_base(number, unit, field.unit_type))

    def optional_in_base_unit(self, values: Dict[str, Any], units: Dict[str, str], key: str) -> Optional[float]:
        number = self.to_float(values.get(key))
        if number is None or number <= 0:
            return None
        return self.in_base_unit(values, units, key)

    # Translation helpers

    @staticmethod
    def text(t: Dict[str, Any], key: str, default: str) -> str:
        return t.get("values", {}).get(key) or default

    @staticmethod
    def template(t: Dict[str, Any], key: str, default: str, **params: Any) -> str:
        pattern = t.get("formats", {}).get(key) or default
        return pattern.format_map(_SafeFormatDict(params))

    @staticmethod
    def fmt(value: float, decimals: int = 1) -> str:
        return f"{value:,.{decimals}f}"
