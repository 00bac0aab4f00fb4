import json

import pytest

from calchub.calculators.registry import CALCULATORS
from calchub.core import translations
from calchub.core.translations import (
    InvalidTranslationError, TranslationNotFoundError,
    available_locales, deep_merge, load_translation, resolve_locale, validate_translation,
)


class TestDeepMerge:
    """Test cases for merging partial translations."""

    def test_nested_keys_are_merged(self):
        """Test nested dicts keep keys the override does not mention."""
        base = {"inputs": {"weight": {"label": "Weight", "help_text": "kg"}}, "name": "BMI"}
        override = {"inputs": {"weight": {"label": "Peso"}}}

        merged = deep_merge(base, override)

        assert merged == {"inputs": {"weight": {"label": "Peso", "help_text": "kg"}}, "name": "BMI"}

    def test_lists_are_replaced(self):
        """Test lists from the override replace the base list."""
        merged = deep_merge({"faqs": [1, 2, 3]}, {"faqs": [4]})
        assert merged["faqs"] == [4]

    def test_inputs_not_mutated(self):
        """Test neither argument is modified."""
        base = {"values": {"a": "1"}}
        override = {"values": {"b": "2"}}
        deep_merge(base, override)
        assert base == {"values": {"a": "1"}}
        assert override == {"values": {"b": "2"}}


class TestResolveLocale:
    """Test cases for locale normalization."""

    @pytest.mark.parametrize("requested, expected", [
        (None, "en"),
        ("", "en"),
        ("es", "es"),
        ("pt-BR", "pt"),
        ("fr_CA", "fr"),
        ("DE", "de"),
        ("ja", "en"),
    ])
    def test_resolve(self, requested, expected):
        """Test region suffixes are dropped and unsupported locales map to English."""
        assert resolve_locale(requested) == expected


class TestLoadTranslation:
    """Test cases for loading calculator translations."""

    def test_english(self):
        """Test the reference locale loads without fallback."""
        translation = load_translation("bmi", "en")
        assert translation.locale == "en"
        assert translation.is_fallback is False
        assert translation.data["slug"] == "bmi-calculator"

    def test_default_locale(self):
        """Test no locale means English."""
        assert load_translation("bmi").locale == "en"

    def test_localized(self):
        """Test a full locale file."""
        translation = load_translation("bmi", "es")
        assert translation.locale == "es"
        assert translation.is_fallback is False
        assert translation.data["slug"] == "calculadora-imc"
        assert translation.data["values"]["overweight"] == "Sobrepeso"

    def test_region_locale(self):
        """Test a regional locale loads the base language."""
        assert load_translation("bmi", "es-MX").locale == "es"

    def test_partial_file_falls_back_per_key(self):
        """Test keys missing from a partial file come from English."""
        translation = load_translation("ideal-weight", "fr")
        english = load_translation("ideal-weight", "en")

        assert translation.locale == "fr"
        assert translation.is_fallback is False
        assert translation.data["inputs"]["height"]["label"] == "Taille"
        assert translation.data["faqs"] == english.data["faqs"]
        assert translation.data["presets"] == english.data["presets"]

    def test_missing_locale_file(self):
        """Test a supported locale without a file falls back to English."""
        translation = load_translation("waist-to-height-ratio", "fr")
        assert translation.locale == "en"
        assert translation.is_fallback is True
        assert translation.data == load_translation("waist-to-height-ratio", "en").data

    def test_unsupported_locale(self):
        """Test an unsupported locale is flagged as a fallback."""
        translation = load_translation("bmi", "ja")
        assert translation.locale == "en"
        assert translation.is_fallback is True

    @pytest.mark.parametrize("requested", ["english", "eo", "enx"])
    def test_en_prefixed_unsupported_locale(self, requested):
        """Test locales that only start with "en" are still a fallback."""
        translation = load_translation("bmi", requested)
        assert translation.locale == "en"
        assert translation.is_fallback is True

    @pytest.mark.parametrize("requested", ["en", "en-US", "en_GB", "EN"])
    def test_english_variants_are_not_fallback(self, requested):
        """Test English region variants are served without fallback."""
        assert load_translation("bmi", requested).is_fallback is False

    def test_unknown_calculator(self):
        """Test an unknown calculator has no translation at all."""
        with pytest.raises(TranslationNotFoundError):
            load_translation("does-not-exist", "en")

    def test_cached(self):
        """Test repeated loads return the same object."""
        assert load_translation("bmi", "de") is load_translation("bmi", "de")

    def test_invalid_json(self, tmp_path, monkeypatch):
        """Test a broken file raises InvalidTranslationError."""
        folder = tmp_path / "broken"
        folder.mkdir()
        (folder / "en.json").write_text("{not json", encoding="utf-8")
        monkeypatch.setattr(translations, "TRANSLATIONS_DIR", tmp_path)

        with pytest.raises(InvalidTranslationError):
            load_translation("broken", "en")

    def test_non_object_json(self, tmp_path, monkeypatch):
        """Test a file must hold a JSON object."""
        folder = tmp_path / "listy"
        folder.mkdir()
        (folder / "en.json").write_text(json.dumps(["a"]), encoding="utf-8")
        monkeypatch.setattr(translations, "TRANSLATIONS_DIR", tmp_path)

        with pytest.raises(InvalidTranslationError):
            load_translation("listy", "en")


class TestTranslationCoverage:
    """Test cases for translation completeness checks."""

    @pytest.mark.parametrize("calculator_id", sorted(CALCULATORS))
    def test_english_is_complete(self, calculator_id):
        """Test every English file labels every input, result and preset."""
        assert validate_translation(CALCULATORS[calculator_id], "en") == []

    @pytest.mark.parametrize("calculator_id", sorted(CALCULATORS))
    def test_every_calculator_has_spanish(self, calculator_id):
        """Test every calculator ships a Spanish file."""
        assert "es" in available_locales(calculator_id)

    def test_missing_file(self):
        """Test a missing locale file is reported as a whole."""
        assert validate_translation(CALCULATORS["waist-to-height-ratio"], "fr") == ["<file>"]

    def test_partial_file_reports_gaps(self):
        """Test a partial file lists its missing labels."""
        missing = validate_translation(CALCULATORS["ideal-weight"], "fr")
        assert "results.ideal_weight.label" not in missing
        assert "inputs.height.label" not in missing
        assert any(key.startswith("presets.") for key in missing)

    def test_available_locales(self):
        """Test locales are listed from the files on disk."""
        assert available_locales("bmi") == ["de", "en", "es", "fr", "pt"]
        assert available_locales("does-not-exist") == []
