import json
import logging

from observability import build_log_context, log_event, redact_headers


def test_build_log_context_adds_request_id_and_drops_none():
    ctx = build_log_context(tool="getCoinPrice", exchange=None)
    assert ctx["tool"] == "getCoinPrice"
    assert "exchange" not in ctx
    assert len(ctx["request_id"]) == 12


def test_build_log_context_keeps_given_request_id():
    assert build_log_context(request_id="abc")["request_id"] == "abc"


def test_redact_headers():
    out = redact_headers({"accept": "application/json", "x-cg-demo-api-key": "secret"})
    assert out == {"accept": "application/json", "x-cg-demo-api-key": "***REDACTED***"}


def test_log_event_emits_single_json_line(caplog):
    with caplog.at_level(logging.INFO, logger="coinprice"):
        log_event("tool_call", ctx={"tool": "checkApiStatus"}, data={"path": "/ping"})

    records = [r for r in caplog.records if r.name == "coinprice"]
    assert len(records) == 1
    payload = json.loads(records[0].getMessage())
    assert payload["event"] == "tool_call"
    assert payload["tool"] == "checkApiStatus"
    assert payload["data"] == {"path": "/ping"}
