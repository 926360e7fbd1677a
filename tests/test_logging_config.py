from pathlib import Path
import json
import logging
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from style_app.logging_config import JsonFormatter, correlation_context, log_event, redact_for_log


def test_redact_for_log_masks_sensitive_fields() -> None:
    payload = {
        "user_id": "user-42",
        "look": {"imageUrl": "https://cdn.example.com/a.jpg", "vibe": "relaxed"},
        "note": "mail me at someone@example.com",
        "link": "https://example.com/look",
        "counts": [1, 2],
    }

    scrubbed = redact_for_log(payload)

    assert scrubbed["user_id"] == "[redacted]"
    assert scrubbed["look"] == {"imageUrl": "[redacted]", "vibe": "relaxed"}
    assert scrubbed["note"] == "mail me at [redacted-email]"
    assert scrubbed["link"] == "[redacted-url]"
    assert scrubbed["counts"] == [1, 2]


def test_log_event_emits_json_with_correlation_id(caplog) -> None:
    logger = logging.getLogger("tests.logging")
    with caplog.at_level(logging.INFO, logger="tests.logging"):
        with correlation_context("corr-123"):
            log_event(logger, logging.INFO, "style_report_test", user_id="user-1", look_count=3)

    record = caplog.records[-1]
    payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "style_report_test"
    assert payload["correlation_id"] == "corr-123"
    assert payload["user_id"] == "[redacted]"
    assert payload["look_count"] == 3
