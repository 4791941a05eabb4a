import logging

from prompt_forge.core.types import GenerationOptions, OutputFormat
from prompt_forge.prompting import TEMPLATE_PRESETS, apply_preset, build_instruction


def test_instruction_minimal():
    text = build_instruction(GenerationOptions(max_chars=180))
    assert "Maximum 180 characters" in text
    assert "Use comma-separated keywords/phrases" in text
    assert "aspect ratio" not in text
    assert text.endswith("\n\nGenerate the prompt now:")


def test_instruction_includes_optional_requirements():
    options = GenerationOptions(aspect_ratio="16:9", style="cinematic", extra_params="--v 6")
    text = build_instruction(options)
    assert "- Include aspect ratio: 16:9" in text
    assert "- Apply cinematic style" in text
    assert "- End with these parameters: --v 6" in text


def test_presets_cover_original_set():
    assert set(TEMPLATE_PRESETS) == {"product", "character", "logo", "landscape", "portrait", "anime"}


def test_apply_preset_returns_new_options():
    base = GenerationOptions(max_chars=200, output_format=OutputFormat.STRUCTURED)
    options = apply_preset("Landscape", base)

    assert options is not base
    assert options.style == "cinematic"
    assert options.aspect_ratio == "16:9"
    assert options.extra_params == "wide angle, cinematic lighting, epic"
    assert options.max_chars == 200
    assert options.output_format is OutputFormat.STRUCTURED
    assert base.style is None


def test_unknown_preset_is_ignored(caplog):
    base = GenerationOptions()
    with caplog.at_level(logging.WARNING, logger="prompt_forge"):
        assert apply_preset("vaporwave", base) is base
    assert "vaporwave" in caplog.text
    assert apply_preset("", base) is base
    assert apply_preset(None, base) is base
