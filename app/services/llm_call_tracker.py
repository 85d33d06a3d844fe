"""Oracle call tracking: usage and audit logging of every Gemini request."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.config import settings

logger = logging.getLogger(__name__)

RAW_PAYLOAD_LIMIT = 500


def _truncate_raw(raw: Any) -> str | None:
    if raw is None:
        return None
    text = raw if isinstance(raw, str) else json.dumps(raw, ensure_ascii=False, default=str)
    return text[:RAW_PAYLOAD_LIMIT]


class LLMCallTracker:
    """Append one JSON line per oracle call and keep running totals."""

    def __init__(self, logs_dir: Path | None = None, enabled: bool = True):
        self.logs_dir = Path(logs_dir or settings.LOGS_DIR)
        self.calls_log_file = self.logs_dir / "oracle_calls.jsonl"
        self.summary_file = self.logs_dir / "summary.json"
        self.enabled = enabled

    def log_call(
        self,
        *,
        model: str,
        prompt: str,
        response_text: str,
        input_tokens: int = 0,
        output_tokens: int = 0,
        stage: str = "general",
        duration_ms: float | None = None,
        success: bool = True,
        error_message: str | None = None,
        raw_payload: Any = None,
    ) -> None:
        """Log a single oracle call.

        Args:
            model: Model identifier (e.g., 'gemini-2.0-flash')
            prompt: Prompt sent to the oracle
            response_text: Generated text (empty on failure)
            input_tokens: Prompt token count reported by the API
            output_tokens: Candidate token count reported by the API
            stage: Caller label (e.g., 'recommendations')
            duration_ms: Call duration in milliseconds
            success: Whether the call succeeded
            error_message: Error details if call failed
            raw_payload: Offending response body, kept for diagnosis
        """
        call_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "model": model,
            "stage": stage,
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
            "duration_ms": duration_ms,
            "success": success,
            "error_message": error_message,
            "prompt_length": len(prompt),
            "response_length": len(response_text),
            "raw_payload": _truncate_raw(raw_payload),
        }

        if success:
            logger.info(
                "Oracle call [%s]: model=%s, tokens=%d/%d, duration=%.1fms",
                stage, model, input_tokens, output_tokens, duration_ms or 0,
            )
        else:
            logger.warning("Oracle call failed [%s]: %s", stage, error_message)

        if not self.enabled:
            return
        self._append_to_log(call_record)
        self._update_summary(model, input_tokens, output_tokens, success)

    def _append_to_log(self, call_record: dict[str, Any]) -> None:
        try:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            with open(self.calls_log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(call_record, ensure_ascii=False) + "\n")
        except OSError as e:
            logger.error("Failed to write oracle call log: %s", e)

    def _update_summary(
        self, model: str, input_tokens: int, output_tokens: int, success: bool,
    ) -> None:
        try:
            summary = self.get_summary()
            models = summary.setdefault("models", {})
            stats = models.setdefault(model, {
                "call_count": 0,
                "success_count": 0,
                "error_count": 0,
                "total_input_tokens": 0,
                "total_output_tokens": 0,
            })
            stats["call_count"] += 1
            if success:
                stats["success_count"] += 1
            else:
                stats["error_count"] += 1
            stats["total_input_tokens"] += input_tokens
            stats["total_output_tokens"] += output_tokens

            summary["last_updated"] = datetime.now(timezone.utc).isoformat()
            summary["total_calls"] = sum(m["call_count"] for m in models.values())
            summary["total_errors"] = sum(m["error_count"] for m in models.values())

            self.logs_dir.mkdir(parents=True, exist_ok=True)
            with open(self.summary_file, "w", encoding="utf-8") as f:
                json.dump(summary, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error("Failed to update oracle summary: %s", e)

    def get_summary(self) -> dict[str, Any]:
        """Get current oracle usage summary."""
        empty = {"total_calls": 0, "total_errors": 0, "models": {}}
        if not self.summary_file.exists():
            return empty
        try:
            with open(self.summary_file, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError):
            return empty

    def export_audit_trail(
        self, limit: int = 100, failed_only: bool = False,
    ) -> list[dict[str, Any]]:
        """Return the most recent call records, newest first."""
        if not self.calls_log_file.exists():
            return []

        calls = []
        try:
            with open(self.calls_log_file, encoding="utf-8") as f:
                for line in f:
                    try:
                        call = json.loads(line.strip())
                    except json.JSONDecodeError:
                        continue
                    if failed_only and call.get("success"):
                        continue
                    calls.append(call)
        except OSError:
            pass

        return sorted(
            calls,
            key=lambda x: x.get("timestamp", ""),
            reverse=True,
        )[:limit]


_tracker: LLMCallTracker | None = None


def get_tracker() -> LLMCallTracker:
    """Get the global oracle call tracker."""
    global _tracker
    if _tracker is None:
        _tracker = LLMCallTracker(enabled=settings.ORACLE_LOG_ENABLED)
    return _tracker
