from app.services.llm_call_tracker import RAW_PAYLOAD_LIMIT, LLMCallTracker


def test_log_call_appends_record_and_summary(tmp_path):
    tracker = LLMCallTracker(logs_dir=tmp_path)
    tracker.log_call(model="gemini-2.0-flash", prompt="abc", response_text="[]",
                     input_tokens=10, output_tokens=5, stage="recommendations")
    tracker.log_call(model="gemini-2.0-flash", prompt="abc", response_text="",
                     success=False, error_message="HTTP 503")

    summary = tracker.get_summary()
    assert summary["total_calls"] == 2
    assert summary["total_errors"] == 1
    assert summary["models"]["gemini-2.0-flash"]["total_input_tokens"] == 10

    calls = tracker.export_audit_trail()
    assert len(calls) == 2
    failed = tracker.export_audit_trail(failed_only=True)
    assert [c["error_message"] for c in failed] == ["HTTP 503"]


def test_raw_payload_is_truncated(tmp_path):
    tracker = LLMCallTracker(logs_dir=tmp_path)
    tracker.log_call(model="m", prompt="", response_text="", success=False,
                     raw_payload={"text": "x" * 5000})
    [call] = tracker.export_audit_trail()
    assert len(call["raw_payload"]) == RAW_PAYLOAD_LIMIT


def test_disabled_tracker_writes_nothing(tmp_path):
    tracker = LLMCallTracker(logs_dir=tmp_path / "logs", enabled=False)
    tracker.log_call(model="m", prompt="", response_text="")
    assert not (tmp_path / "logs").exists()
    assert tracker.get_summary()["total_calls"] == 0
