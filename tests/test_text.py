import pytest

from prompt_forge.core.types import AnalyzerSignals
from prompt_forge.text import (
    RewriteContext,
    TextPipeline,
    add_suffix_safely,
    clamp_to_max_chars,
    first_non_empty_line,
    normalize_punctuation,
    process,
    rewrite_background,
    strip_copy_space,
)

SUFFIX = "isolated on white background"


# =============================================================================
# clamp_to_max_chars
# =============================================================================


def test_clamp_leaves_short_text_alone():
    assert clamp_to_max_chars("a cat, studio light.", 50) == "a cat, studio light."


def test_clamp_cuts_at_word_boundary():
    assert clamp_to_max_chars("one two three four", 10) == "one two"


def test_clamp_hard_cut_when_boundary_too_early():
    assert clamp_to_max_chars("one two", 3) == "one"
    assert clamp_to_max_chars("a verylongword", 8) == "a verylo"


def test_clamp_strips_trailing_punctuation():
    assert clamp_to_max_chars("red fox, forest, dusk light", 17) == "red fox, forest"


# =============================================================================
# add_suffix_safely
# =============================================================================


def test_suffix_joined_with_comma():
    assert add_suffix_safely("a red mug", SUFFIX, 100) == f"a red mug, {SUFFIX}"


def test_suffix_after_terminal_punctuation_uses_space():
    assert add_suffix_safely("A red mug.", SUFFIX, 100) == f"A red mug. {SUFFIX}"


def test_suffix_trims_soft_punctuation():
    assert add_suffix_safely("a red mug, ;", SUFFIX, 100) == f"a red mug, {SUFFIX}"


def test_suffix_skipped_when_present():
    text = "product shot, Isolated On White Background, soft light"
    assert add_suffix_safely(text, SUFFIX, 100) == text


def test_suffix_truncates_base_to_fit():
    text = "a glossy ceramic coffee mug with steam rising"
    result = add_suffix_safely(text, SUFFIX, 45)
    assert len(result) <= 45
    assert result.endswith(SUFFIX)
    assert result == f"a glossy cerami, {SUFFIX}"


def test_suffix_alone_when_no_room():
    assert add_suffix_safely("a red mug", SUFFIX, 20) == SUFFIX[:20]
    assert add_suffix_safely("", SUFFIX, 100) == SUFFIX


@pytest.mark.parametrize(
    "text",
    [
        "a red mug",
        "A red mug.",
        "a glossy ceramic coffee mug with steam rising, studio light, 8k",
        "",
        ",,,",
        "isolated on white background " * 5,
    ],
)
@pytest.mark.parametrize("max_chars", [10, 28, 31, 45, 60, 250])
def test_suffix_bounded_and_idempotent(text, max_chars):
    once = add_suffix_safely(text, SUFFIX, max_chars)
    twice = add_suffix_safely(once, SUFFIX, max_chars)
    assert len(once) <= max_chars
    assert twice == once


# =============================================================================
# STAGES
# =============================================================================


def test_first_line_skips_blank_lines_and_quotes():
    raw = '\n\n  "A misty harbour at dawn, muted tones"  \nThis prompt captures...'
    assert first_non_empty_line(raw) == "A misty harbour at dawn, muted tones"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("A cat, copy space on the left", "A cat"),
        ("A cat with ample negative space at the top, soft light", "A cat, soft light"),
        ("minimal desk, plenty of copy-space to the right side, pastel", "minimal desk, pastel"),
        ("copy space for text, bold red poster", "bold red poster"),
        ("a lone tree, negative space", "a lone tree"),
    ],
)
def test_strip_copy_space(text, expected):
    assert strip_copy_space(text) == expected


def test_normalize_punctuation():
    assert normalize_punctuation("  a cat ,  , on a mat ,") == "a cat, on a mat"
    assert normalize_punctuation("a cat, .") == "a cat."
    assert normalize_punctuation("16:9 --ar 16:9") == "16:9 --ar 16:9"
    assert normalize_punctuation("nebula::2 , , stars::1") == "nebula::2, stars::1"


@pytest.mark.parametrize(
    "text",
    [
        "nebula::2 spaceship::1, cinematic light --ar 16:9",
        "portrait ;  soft light ,  film grain",
        "  a cat  ",
    ],
)
def test_strip_copy_space_leaves_text_without_phrase(text):
    assert strip_copy_space(text) == text


@pytest.mark.parametrize(
    "phrase",
    ["transparent background", "alpha background", "clear background", "no background",
     "checkered background", "transparent PNG background"],
)
def test_rewrite_background(phrase):
    assert rewrite_background(f"a mug on a {phrase}") == "a mug on a white background"


# =============================================================================
# PIPELINE
# =============================================================================


def test_process_end_to_end_with_cutout():
    signals = AnalyzerSignals(cutout=True)
    result = process(
        "A cat on a transparent background, copy space on the left", signals, 250
    )
    assert result == "A cat on a white background, isolated on white background"


def test_process_text_mention_triggers_white_background():
    result = process("a mug on a transparent background", AnalyzerSignals.neutral(), 250)
    assert result.endswith(SUFFIX)
    assert "transparent" not in result


def test_process_without_signals_leaves_prompt():
    assert process("a mug on a wooden table, warm light") == "a mug on a wooden table, warm light"


def test_process_keeps_multi_prompt_weights():
    raw = "nebula::2 spaceship::1, cinematic light --ar 16:9"
    assert process(raw) == raw


def test_process_respects_budget_with_checkerboard():
    raw = "a very detailed ceramic mug with intricate painted flowers and golden rim"
    result = process(raw, AnalyzerSignals(checkerboard=True), 50)
    assert len(result) <= 50
    assert result.endswith(SUFFIX)


def test_process_empty_input():
    assert process("") == ""
    assert process(None) == ""


def test_failing_stage_passes_input_through():
    def explode(text, ctx):
        raise RuntimeError("boom")

    def shout(text, ctx):
        return text.upper()

    pipeline = TextPipeline([("explode", explode), ("shout", shout), ("bad", lambda t, c: None)])
    assert pipeline.stage_names == ["explode", "shout", "bad"]
    assert pipeline.run("a cat", RewriteContext()) == "A CAT"
