"""Unit tests for the logging utilities."""

from __future__ import annotations

import json
import logging

from sessiontokens.core.logger import (
    REDACTED,
    JSONFormatter,
    TokenRedactionFilter,
    configure_logging,
)


def _record(msg: str, *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord("sessiontokens.test", logging.WARNING, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    configure_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_falls_back_to_info_for_unknown_names() -> None:
    configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO


def test_json_formatter_includes_token_error_extra() -> None:
    record = _record("JWT token expired", token_error="expired", request_id=None)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "JWT token expired"
    assert payload["level"] == "WARNING"
    assert payload["token_error"] == "expired"


def test_redaction_filter_scrubs_bearer_tokens(service) -> None:
    token = service.generate_access_token("alice")
    record = _record("Rejected header %s", f"Bearer {token}")

    assert TokenRedactionFilter().filter(record) is True

    assert token not in record.getMessage()
    assert REDACTED in record.getMessage()


def test_redaction_filter_scrubs_bare_compact_tokens(service) -> None:
    token = service.generate_refresh_token("alice")
    record = _record(f"got {token} from client")

    TokenRedactionFilter().filter(record)

    assert record.getMessage() == f"got {REDACTED} from client"


def test_redaction_filter_leaves_plain_messages_untouched() -> None:
    record = _record("Token service ready: alg=%s", "HS512")

    TokenRedactionFilter().filter(record)

    assert record.getMessage() == "Token service ready: alg=HS512"
