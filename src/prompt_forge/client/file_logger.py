# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Transaction file logger for Gemini requests.

Provides request-level logging for debugging API calls. Each attempt gets
its own directory with separate files for the request, the response and
errors. Inline image data is never written.
"""

from __future__ import annotations

import copy
import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.constants import TRANSACTION_LOG_SUBDIR

lib_logger = logging.getLogger("prompt_forge")


def redact_inline_data(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a request payload with base64 image data elided."""
    redacted = copy.deepcopy(payload)
    for content in redacted.get("contents", []):
        for part in content.get("parts", []):
            inline = part.get("inlineData")
            if isinstance(inline, dict) and "data" in inline:
                inline["data"] = f"<{len(inline['data'])} base64 chars>"
    return redacted


class TransactionLogger:
    """
    Per-attempt file logger.

    Creates a unique directory for each attempt and logs:
    - Request payload (JSON, image data elided)
    - Final response (JSON)
    - Errors (text)
    """

    __slots__ = ("enabled", "log_dir")

    def __init__(
        self,
        model_name: str,
        enabled: bool,
        base_dir: Union[str, Path] = "logs",
    ):
        """
        Initialize the file logger.

        Args:
            model_name: Name of the model (used in directory name)
            enabled: Whether logging is enabled
            base_dir: Root log directory; attempts go under gemini_logs/
        """
        self.enabled = enabled
        self.log_dir: Optional[Path] = None

        if not enabled:
            return

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        safe_model_name = model_name.replace("/", "_").replace(":", "_")
        request_id = uuid.uuid4().hex[:8]

        self.log_dir = (
            Path(base_dir) / TRANSACTION_LOG_SUBDIR / f"{timestamp}_{safe_model_name}_{request_id}"
        )

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            lib_logger.error(f"Failed to create log directory: {e}")
            self.enabled = False

    def log_request(self, payload: Dict[str, Any]) -> None:
        """Log the request payload sent to the API."""
        if not self.enabled:
            return
        self._write_json("request_payload.json", redact_inline_data(payload))

    def log_error(self, error_message: str) -> None:
        """Log an error message with timestamp."""
        self._append_text(
            "error.log", f"[{datetime.now(timezone.utc).isoformat()}] {error_message}"
        )

    def log_final_response(self, status_code: int, response_data: Any) -> None:
        """Log the final response body."""
        self._write_json(
            "final_response.json", {"status_code": status_code, "body": response_data}
        )

    def _write_json(self, filename: str, data: Dict[str, Any]) -> None:
        """Write JSON data to a file."""
        if not self.enabled or not self.log_dir:
            return
        try:
            with open(self.log_dir / filename, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError) as e:
            lib_logger.error(f"TransactionLogger: Failed to write {filename}: {e}")

    def _append_text(self, filename: str, text: str) -> None:
        """Append text to a file."""
        if not self.enabled or not self.log_dir:
            return
        try:
            with open(self.log_dir / filename, "a", encoding="utf-8") as f:
                f.write(text + "\n")
        except OSError as e:
            lib_logger.error(f"TransactionLogger: Failed to append to {filename}: {e}")
