from .logging import build_log_context, configure_logging, log_event, now_ms, redact_headers

__all__ = ["build_log_context", "configure_logging", "log_event", "now_ms", "redact_headers"]
