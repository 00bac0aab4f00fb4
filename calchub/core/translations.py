# calchub/core/translations.py
"""
Translation loading for calculator content.

Files live at ``translations/<calculator_id>/<locale>.json``. English is the
reference locale: a locale file may be partial, and any key it omits is taken
from English. A missing or unsupported locale falls back to English entirely
and is flagged with ``is_fallback``.
"""
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, List, Optional
import copy
import json
import logging

from calchub.core.config import settings

logger = logging.getLogger(__name__)

TRANSLATIONS_DIR = (
    Path(settings.TRANSLATIONS_DIR)
    if settings.TRANSLATIONS_DIR
    else Path(__file__).resolve().parent.parent / "translations"
)


class TranslationError(Exception):
    """Base class for translation loading errors."""


class TranslationNotFoundError(TranslationError):
    """No translation exists for the calculator, not even the English one."""


class InvalidTranslationError(TranslationError):
    """A translation file exists but cannot be parsed."""


@dataclass(frozen=True)
class LoadedTranslation:
    calculator_id: str
    locale: str
    data: Dict[str, Any]
    is_fallback: bool = False


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new dict with ``override`` merged recursively over ``base``. Lists are replaced, not merged."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _read_file(calculator_id: str, locale: str) -> Optional[Dict[str, Any]]:
    path = TRANSLATIONS_DIR / calculator_id / f"{locale}.json"
    if not path.is_file():
        return None
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid translation file {path}: {e}")
        raise InvalidTranslationError(f"Invalid translation for {calculator_id}/{locale}") from e
    if not isinstance(data, dict):
        raise InvalidTranslationError(f"Translation for {calculator_id}/{locale} must be a JSON object")
    return data


def short_locale(locale: str) -> str:
    """"pt_BR", "pt-BR" -> "pt"."""
    return locale.replace("_", "-").split("-")[0].strip().lower()


def resolve_locale(locale: Optional[str]) -> str:
    """Normalize a requested locale ("pt-BR" -> "pt"); unsupported ones map to the default."""
    if not locale:
        return settings.DEFAULT_LOCALE
    short = short_locale(locale)
    return short if settings.is_supported_locale(short) else settings.DEFAULT_LOCALE


@lru_cache(maxsize=256)
def load_translation(calculator_id: str, locale: Optional[str] = None) -> LoadedTranslation:
    """
    Load the translation of a calculator for a locale.

    The returned data is cached and shared, callers must not mutate it.

    Raises:
        TranslationNotFoundError: when even the default locale file is missing.
        InvalidTranslationError: when a file is not valid JSON.
    """
    default_locale = settings.DEFAULT_LOCALE
    base = _read_file(calculator_id, default_locale)
    if base is None:
        raise TranslationNotFoundError(f"No {default_locale} translation for calculator '{calculator_id}'")

    requested = resolve_locale(locale)
    if requested == default_locale:
        unsupported = bool(locale) and short_locale(locale) != default_locale
        if unsupported:
            logger.info(f"Locale '{locale}' not supported, using {default_locale}")
        return LoadedTranslation(calculator_id, default_locale, base, is_fallback=unsupported)

    localized = _read_file(calculator_id, requested)
    if localized is None:
        logger.info(f"No {requested} translation for {calculator_id}, falling back to {default_locale}")
        return LoadedTranslation(calculator_id, default_locale, base, is_fallback=True)

    return LoadedTranslation(calculator_id, requested, deep_merge(base, localized))


def clear_translation_cache() -> None:
    load_translation.cache_clear()


def available_locales(calculator_id: str) -> List[str]:
    folder = TRANSLATIONS_DIR / calculator_id
    if not folder.is_dir():
        return []
    return sorted(
        path.stem for path in folder.glob("*.json") if settings.is_supported_locale(path.stem)
    )


def validate_translation(calculator, locale: str) -> List[str]:
    """
    List the keys a locale file is missing for a calculator.

    Checks the top level texts plus a label for every input, result and
    preset declared by the calculator config. An empty list means complete.
    """
    data = _read_file(calculator.config.id, locale)
    if data is None:
        return ["<file>"]

    missing = [key for key in ("name", "slug", "subtitle") if not data.get(key)]
    inputs = data.get("inputs", {})
    for field in calculator.config.inputs:
        if not inputs.get(field.id, {}).get("label"):
            missing.append(f"inputs.{field.id}.label")
    results = data.get("results", {})
    for result in calculator.config.results:
        if not results.get(result.id, {}).get("label"):
            missing.append(f"results.{result.id}.label")
    presets = data.get("presets", {})
    for preset in calculator.config.presets:
        if not presets.get(preset.id, {}).get("label"):
            missing.append(f"presets.{preset.id}.label")
    return missing
