# calchub/calculators/registry.py
from typing import Dict, Any, List, Optional, Tuple
import logging

from calchub.calculators.base import BaseCalculator
from calchub.calculators.bmi import BMICalculator
from calchub.calculators.emergency_fund import EmergencyFundCalculator
from calchub.calculators.gender_predictor import GenderPredictorCalculator
from calchub.calculators.ideal_weight import IdealWeightCalculator
from calchub.calculators.ovulation import OvulationCalculator
from calchub.calculators.transfer_time import TransferTimeCalculator
from calchub.calculators.waist_to_height import WaistToHeightCalculator
from calchub.core.config import settings
from calchub.core.translations import available_locales, load_translation
from calchub.schemas.calculators import CalculatorResult
from calchub.schemas.schemas import (
    CalculatorSummary, LocalizedCalculator, LocalizedInput, LocalizedPreset, FAQ,
)

logger = logging.getLogger(__name__)


class CalculatorNotFoundError(KeyError):
    pass


class PresetNotFoundError(KeyError):
    pass


CALCULATORS: Dict[str, BaseCalculator] = {
    calculator.id: calculator
    for calculator in (
        BMICalculator(),
        IdealWeightCalculator(),
        WaistToHeightCalculator(),
        GenderPredictorCalculator(),
        OvulationCalculator(),
        TransferTimeCalculator(),
        EmergencyFundCalculator(),
    )
}


def get_calculator(calculator_id: str) -> BaseCalculator:
    try:
        return CALCULATORS[calculator_id]
    except KeyError:
        raise CalculatorNotFoundError(calculator_id) from None


def find_calculator(id_or_slug: str, locale: Optional[str] = None) -> BaseCalculator:
    """
    Resolve a calculator by id or by its localized slug.

    The requested locale's slugs are searched first, then every other
    supported locale, so a shared link keeps working after a language switch.
    """
    if id_or_slug in CALCULATORS:
        return CALCULATORS[id_or_slug]
    locales = [locale] if locale else []
    locales += [code for code in settings.SUPPORTED_LOCALES if code != locale]
    for code in locales:
        for calculator in CALCULATORS.values():
            translation = load_translation(calculator.id, code)
            if translation.data.get("slug") == id_or_slug:
                return calculator
    raise CalculatorNotFoundError(id_or_slug)


def list_calculators(category: Optional[str] = None) -> List[BaseCalculator]:
    return [
        calculator for calculator in CALCULATORS.values()
        if category is None or calculator.config.category.value == category
    ]


def summarize(calculator: BaseCalculator, locale: Optional[str] = None) -> CalculatorSummary:
    t = load_translation(calculator.id, locale).data
    return CalculatorSummary(
        id=calculator.id,
        slug=t.get("slug", calculator.id),
        name=t.get("name", calculator.id),
        subtitle=t.get("subtitle"),
        category=calculator.config.category.value,
        icon=calculator.config.icon,
    )


def localize_config(calculator: BaseCalculator, locale: Optional[str] = None) -> LocalizedCalculator:
    """Merge a calculator's config with its translation into a renderable description."""
    translation = load_translation(calculator.id, locale)
    t = translation.data
    config = calculator.config
    input_texts = t.get("inputs", {})
    result_texts = t.get("results", {})
    preset_texts = t.get("presets", {})

    inputs = []
    for field in config.inputs:
        texts = input_texts.get(field.id, {})
        option_labels = texts.get("options", {})
        inputs.append(LocalizedInput(
            id=field.id,
            type=field.type.value,
            label=texts.get("label", field.id),
            help_text=texts.get("help_text"),
            required=field.required,
            default=field.default,
            min=field.min,
            max=field.max,
            step=field.step,
            units=field.units,
            default_unit=field.default_unit,
            options=[{"value": option, "label": option_labels.get(option, option)} for option in field.options],
            show_when=field.show_when,
        ))

    presets = [
        LocalizedPreset(
            id=preset.id,
            label=preset_texts.get(preset.id, {}).get("label", preset.id),
            description=preset_texts.get(preset.id, {}).get("description"),
            icon=preset.icon,
            values=preset.values,
        )
        for preset in config.presets
    ]

    return LocalizedCalculator(
        id=config.id,
        slug=t.get("slug", config.id),
        locale=translation.locale,
        is_fallback=translation.is_fallback,
        available_locales=available_locales(config.id),
        name=t.get("name", config.id),
        subtitle=t.get("subtitle"),
        category=config.category.value,
        icon=config.icon,
        seo=t.get("seo", {}),
        inputs=inputs,
        results=[
            {"id": result.id, "type": result.type, "format": result.format.value,
             "label": result_texts.get(result.id, {}).get("label", result.id)}
            for result in config.results
        ],
        presets=presets,
        faqs=[FAQ(**faq) for faq in t.get("faqs", [])],
        related=[related for related in config.related if related in CALCULATORS],
    )


def run_calculation(
    calculator_id: str,
    values: Dict[str, Any],
    units: Optional[Dict[str, str]] = None,
    locale: Optional[str] = None,
) -> Tuple[CalculatorResult, str]:
    """Run a calculator with localized texts. Returns the result and the locale actually used."""
    calculator = get_calculator(calculator_id)
    translation = load_translation(calculator_id, locale)
    result = calculator.calculate(values, units, translation.data)
    if not result.is_valid:
        logger.info(f"Calculation for {calculator_id} returned an invalid result")
    return result, translation.locale


def apply_preset(calculator_id: str, preset_id: str) -> Dict[str, Any]:
    """Default input values overlaid with a preset's values."""
    calculator = get_calculator(calculator_id)
    preset = calculator.config.get_preset(preset_id)
    if preset is None:
        raise PresetNotFoundError(preset_id)
    return {**calculator.config.default_values(), **preset.values}
