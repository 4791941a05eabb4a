# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Instruction text sent alongside the image.
"""

from ..core.types import GenerationOptions

_BASE_INSTRUCTION = """You are an expert AI prompt engineer. Analyze this image and generate a creative, detailed prompt that could recreate it using an AI image generator like Midjourney or DALL-E.

Requirements:
- Maximum {max_chars} characters
- Be descriptive about style, lighting, composition, colors, mood
- Use comma-separated keywords/phrases
- Do NOT include any explanations, just the prompt itself"""


def build_instruction(options: GenerationOptions) -> str:
    """
    Render the model instruction for one round.

    Optional requirements (aspect ratio, style, trailing parameters) are
    appended only when set.
    """
    lines = [_BASE_INSTRUCTION.format(max_chars=options.max_chars)]
    if options.aspect_ratio:
        lines.append(f"- Include aspect ratio: {options.aspect_ratio}")
    if options.style:
        lines.append(f"- Apply {options.style} style")
    if options.extra_params:
        lines.append(f"- End with these parameters: {options.extra_params}")
    return "\n".join(lines) + "\n\nGenerate the prompt now:"
