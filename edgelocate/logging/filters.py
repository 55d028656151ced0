"""Logging filters that enrich and sanitise records."""

from __future__ import annotations

import logging

from .context import client_ip_ctx_var, request_id_ctx_var
from .privacy import sanitize_value


class PrivacyFilter(logging.Filter):
    """Ensure secrets and precise coordinates never hit the logs."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key in list(record.__dict__.keys()):
            if key in {"exc_info", "exc_text", "stack_info", "msg"}:
                continue
            record.__dict__[key] = sanitize_value(key, record.__dict__[key])
        if record.args:
            if isinstance(record.args, tuple):
                record.args = tuple(sanitize_value("arg", arg) for arg in record.args)
            elif isinstance(record.args, dict):
                record.args = {k: sanitize_value(k, v) for k, v in record.args.items()}
        return True


class RequestContextFilter(logging.Filter):
    """Attach request scoped context variables to log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        request_id = request_id_ctx_var.get(None)
        if request_id and not getattr(record, "request_id", None):
            record.request_id = request_id
        client_ip = client_ip_ctx_var.get(None)
        if client_ip and not getattr(record, "client_ip", None):
            record.client_ip = client_ip
        return True
