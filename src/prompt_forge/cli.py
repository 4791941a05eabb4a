# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Command line entry point.

    prompt-forge photo.png --num 3 --preset product
    prompt-forge --url https://youtu.be/dQw4w9WgXcQ --format structured
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import httpx

from .analysis import compress_image
from .core.config import ConfigLoader, load_credentials_from_env
from .core.constants import DEFAULT_MAX_CHARS
from .core.errors import PromptForgeError
from .core.types import GenerationOptions, GenerationRequest, OutputFormat, PromptResult
from .pipeline import GenerationPipeline
from .prompting import TEMPLATE_PRESETS, apply_preset
from .sources import fetch_image

lib_logger = logging.getLogger("prompt_forge")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-forge",
        description="Generate text-to-image prompts from an image with Gemini",
    )
    parser.add_argument("image", nargs="?", help="Path to the source image")
    parser.add_argument("--url", help="YouTube link or direct image URL instead of a file")
    parser.add_argument("-n", "--num", type=int, default=2, help="Number of prompts (default: 2)")
    parser.add_argument(
        "--max-chars",
        type=int,
        default=DEFAULT_MAX_CHARS,
        help=f"Character budget per prompt (default: {DEFAULT_MAX_CHARS})",
    )
    parser.add_argument("--preset", choices=sorted(TEMPLATE_PRESETS), help="Template preset")
    parser.add_argument("--aspect-ratio", help="Aspect ratio, e.g. 16:9")
    parser.add_argument("--style", help="Style hint, e.g. photorealistic")
    parser.add_argument("--params", help="Extra parameters appended by the model, e.g. '--v 6'")
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="text prints one prompt per line; structured prints JSON lines",
    )
    parser.add_argument("--model", help="Model identifier (default from PROMPT_FORGE_MODEL)")
    parser.add_argument("--no-compress", action="store_true", help="Send the image as-is")
    parser.add_argument("-d", "--debug", action="store_true", help="Verbose logging")
    return parser


async def _load_image(args: argparse.Namespace) -> bytes:
    if args.url:
        return await fetch_image(args.url)
    return Path(args.image).read_bytes()


def _build_options(args: argparse.Namespace) -> GenerationOptions:
    options = GenerationOptions(max_chars=args.max_chars, output_format=args.format)
    if args.preset:
        options = apply_preset(args.preset, options)

    # Explicit flags win over the preset
    overrides = {
        "aspect_ratio": args.aspect_ratio,
        "style": args.style,
        "extra_params": args.params,
    }
    overrides = {k: v for k, v in overrides.items() if v}
    if overrides:
        options = replace(options, **overrides)
    return options


async def run(args: argparse.Namespace) -> int:
    credentials = load_credentials_from_env()
    config = ConfigLoader().load()

    data = await _load_image(args)
    mime_type = None
    if not args.no_compress:
        data, mime_type = compress_image(data)

    request = GenerationRequest(
        image=data,
        options=_build_options(args),
        num_prompts=args.num,
        mime_type=mime_type,
    )

    async with GenerationPipeline(credentials, model=args.model, config=config) as pipeline:
        async for result in pipeline.generate(request):
            if isinstance(result, PromptResult):
                print(json.dumps(result.to_dict(), ensure_ascii=False), flush=True)
            else:
                print(result, flush=True)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.image and not args.url:
        parser.error("an image path or --url is required")
    if args.num < 1:
        parser.error("--num must be at least 1")
    if args.max_chars < 1:
        parser.error("--max-chars must be at least 1")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(levelname)s ::: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        return asyncio.run(run(args))
    except (PromptForgeError, httpx.HTTPError, OSError) as e:
        lib_logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
