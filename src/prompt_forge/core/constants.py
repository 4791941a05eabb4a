# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Constants and default values for prompt_forge.

All tunable defaults live here; ConfigLoader applies environment
overrides on top of them.
"""

# =============================================================================
# UPSTREAM API
# =============================================================================

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash-lite"

DEFAULT_TEMPERATURE = 0.9
DEFAULT_MAX_OUTPUT_TOKENS = 500

# Transport timeout for a single HTTP call (the retry loop itself has none)
DEFAULT_REQUEST_TIMEOUT = 120.0

# Timeout used when fetching a source image from a URL
DEFAULT_IMAGE_FETCH_TIMEOUT = 15.0

# =============================================================================
# COOLDOWN & RATE GATE
# =============================================================================

# Linear cooldown: min(COOLDOWN_CAP, COOLDOWN_BASE * consecutive_failures)
DEFAULT_COOLDOWN_BASE = 30.0
DEFAULT_COOLDOWN_CAP = 600.0

# Global minimum spacing between requests, independent of credential.
# 4s keeps a pool under the 15 requests/minute free tier.
DEFAULT_MIN_REQUEST_INTERVAL = 4.0

# Delay between sequential generation rounds
DEFAULT_INTER_ROUND_DELAY = 1.0

# =============================================================================
# RETRY POLICY
# =============================================================================

# max_attempts = credential_count * ATTEMPTS_PER_CREDENTIAL
ATTEMPTS_PER_CREDENTIAL = 3

RATE_LIMIT_BACKOFF_STEP = 2.0  # multiplied by the 1-based attempt index
SERVER_ERROR_DELAY = 1.5
NETWORK_ERROR_DELAY = 1.2
EMPTY_RESPONSE_DELAY = 0.5
MAX_JITTER = 0.25

# =============================================================================
# IMAGE ANALYSIS
# =============================================================================

COPY_SPACE_MAX_SIDE = 256
COPY_SPACE_MIN_SIDE = 48
COPY_SPACE_BAND = 0.35  # border band width as a fraction of the axis
COPY_SPACE_CENTER = (0.3, 0.7)  # centre box bounds on each axis
COPY_SPACE_RATIO = 0.4  # border flagged when mean < ratio * centre mean
COPY_SPACE_MAX_SCORE = 1.0 - 1e-9  # score stays below 1 for a perfectly flat band

CUTOUT_SAMPLE_WIDTH = 192
CUTOUT_MIN_HEIGHT = 96
CUTOUT_ALPHA_THRESHOLD = 10
CUTOUT_FRACTION = 0.25
CHECKER_WHITE_MIN = 245
CHECKER_GRAY_RANGE = (200, 220)
CHECKER_FRACTION = 0.10

# Source images are re-encoded to bound request size
IMAGE_MAX_SIZE = 1024
IMAGE_JPEG_QUALITY = 85

# =============================================================================
# TEXT POST-PROCESSING
# =============================================================================

DEFAULT_MAX_CHARS = 250
WHITE_BACKGROUND_SUFFIX = "isolated on white background"
WORD_BOUNDARY_RATIO = 0.6

# =============================================================================
# ENVIRONMENT
# =============================================================================

ENV_PREFIX = "PROMPT_FORGE_"
ENV_API_KEY = "GEMINI_API_KEY"
ENV_API_KEYS = "GEMINI_API_KEYS"

# Logging
TRANSACTION_LOG_SUBDIR = "gemini_logs"
