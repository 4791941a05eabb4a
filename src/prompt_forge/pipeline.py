# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Generation pipeline.

Runs num_prompts sequential rounds against one image. Each round obtains
raw text through the request executor, analyzes the source image and
post-processes the text. Rounds never overlap, and output order matches
round order.
"""

import asyncio
import logging
import random
import time
from dataclasses import replace
from typing import AsyncIterator, Awaitable, Callable, Iterable, List, Optional, Union

from .analysis import analyze_image, prepare_image
from .client import GeminiClient, RequestExecutor
from .core.config import ConfigLoader, PipelineConfig
from .core.types import GenerationRequest, OutputFormat, PromptResult
from .pool import CredentialPool
from .text import process

lib_logger = logging.getLogger("prompt_forge")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class GenerationPipeline:
    """
    Orchestrates generation rounds for one set of credentials.

    Owns one CredentialPool and one RequestExecutor, so cooldowns and the
    global rate gate carry over between calls to generate() on the same
    instance.

    Usage:
        async with GenerationPipeline(["key-a", "key-b"]) as pipeline:
            async for prompt in pipeline.generate(request):
                print(prompt)
    """

    def __init__(
        self,
        credentials: Iterable[str],
        model: Optional[str] = None,
        config: Optional[PipelineConfig] = None,
        client: Optional[GeminiClient] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the pipeline.

        Args:
            credentials: API keys in configured order
            model: Model identifier; overrides config.model when given
            config: Pipeline configuration (defaults to ConfigLoader().load())
            client: Gemini client to use; one is created from config when None
            rng: Source of backoff jitter
            clock: Returns the current timestamp in seconds
            sleep: Awaitable sleep used for every wait

        Raises:
            NoCredentialsError: If credentials is empty
        """
        self.config = config or ConfigLoader().load()
        if model:
            self.config = replace(self.config, model=model)

        self.pool = CredentialPool(
            credentials,
            cooldown_base=self.config.cooldown_base,
            cooldown_cap=self.config.cooldown_cap,
            min_interval=self.config.min_request_interval,
            clock=clock,
            sleep=sleep,
        )
        self._owns_client = client is None
        self.client = client or GeminiClient(
            model=self.config.model,
            base_url=self.config.base_url,
            timeout=self.config.request_timeout,
            log_transactions=self.config.log_transactions,
            log_dir=self.config.log_dir,
            clock=clock,
        )
        self.executor = RequestExecutor(
            self.client,
            rng=rng,
            sleep=sleep,
            temperature=self.config.temperature,
            max_output_tokens=self.config.max_output_tokens,
        )
        self._sleep = sleep

        lib_logger.info(
            f"Pipeline ready: model={self.client.model}, "
            f"credentials={len(self.pool)}, min_interval={self.config.min_request_interval}s"
        )

    async def generate(
        self, request: GenerationRequest
    ) -> AsyncIterator[Union[str, PromptResult]]:
        """
        Yield one finished prompt per round.

        The image is validated before any network attempt. A failed round
        ends the batch; prompts already yielded stay with the caller.

        Args:
            request: Image, options and number of rounds

        Yields:
            str for OutputFormat.TEXT, PromptResult for OutputFormat.STRUCTURED

        Raises:
            InvalidImageDataError: If the image cannot be decoded
            AllCredentialsExhaustedError: If a round spends its attempt budget
        """
        image = prepare_image(request.image, request.mime_type)
        options = request.options

        for round_index in range(request.num_prompts):
            if round_index > 0 and self.config.inter_round_delay > 0:
                await self._sleep(self.config.inter_round_delay)

            lib_logger.info(f"Round {round_index + 1}/{request.num_prompts}")
            raw_text = await self.executor.generate_once(image, options, self.pool)
            signals = analyze_image(image.data)
            text = process(raw_text, signals, options.max_chars)

            if options.output_format == OutputFormat.STRUCTURED:
                yield PromptResult(
                    index=round_index + 1,
                    text=text,
                    raw_text=raw_text,
                    signals=signals,
                    options=options,
                )
            else:
                yield text

    async def generate_all(self, request: GenerationRequest) -> List[Union[str, PromptResult]]:
        """Collect every round of generate() into a list."""
        return [result async for result in self.generate(request)]

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "GenerationPipeline":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
