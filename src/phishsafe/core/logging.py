"""Log redaction for banking telemetry.

Session assembly logs the resolved host context (location fix, device
mapping) at DEBUG, and flow markers may mention transfer amounts.  A
:class:`RedactingFilter` rewrites such records before any handler sees
them, on two paths:

* structured ``%s`` arguments -- pydantic models (e.g. :class:`Location`,
  :class:`SessionInput`) and mappings are walked and sensitive fields
  replaced;
* free text -- ``key=value`` / ``'key': value`` fragments left in the
  formatted message are masked.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Final, Mapping

from pydantic import BaseModel

_MASK: Final[str] = "[REDACTED]"

SENSITIVE_FIELDS: Final[frozenset[str]] = frozenset({
    "within_bank_transfer_amount",
    "transaction_amount",
    "amount",
    "latitude",
    "longitude",
    "account_number",
    "device_id",
    "android_id",
    "imei",
    "serial_number",
})

# Longest keys first so a specific key wins over a suffix of it.
_FIELD_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b(?P<key>"
    + "|".join(re.escape(k) for k in sorted(SENSITIVE_FIELDS, key=len, reverse=True))
    + r")(?P<quote>['\"]?)\s*(?P<sep>[=:])\s*(?P<value>\"[^\"]*\"|'[^']*'|[^\s,}\]]+)",
    re.IGNORECASE,
)


def _mask_match(match: re.Match[str]) -> str:
    if _MASK in match.group("value"):
        return match.group(0)
    return f"{match.group('key')}{match.group('quote')}{match.group('sep')}{_MASK}"


def redact_text(text: str) -> str:
    """Mask the values of sensitive ``key=value`` or ``key: value`` fragments."""
    return _FIELD_PATTERN.sub(_mask_match, text)


def redact_value(value: Any) -> Any:
    """Return *value* with sensitive fields of models and mappings masked.

    Pydantic models are dumped to plain data first, so a
    :class:`~phishsafe.core.types.Location` logs as
    ``{'latitude': '[REDACTED]', 'longitude': '[REDACTED]'}``.  Other
    values pass through unchanged.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {
            key: _MASK if str(key).lower() in SENSITIVE_FIELDS else redact_value(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_value(item) for item in value]
    return value


class RedactingFilter(logging.Filter):
    """Scrubs record arguments and the formatted message; never drops records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, Mapping):
            record.args = redact_value(record.args)
        elif record.args:
            record.args = tuple(redact_value(arg) for arg in record.args)
        record.msg = redact_text(record.getMessage())
        record.args = None
        return True


def attach_redaction(
    logger: logging.Logger | None = None,
    *,
    on_handlers: bool = False,
) -> RedactingFilter:
    """Install a :class:`RedactingFilter` and return it for later removal.

    Logger-level filters only see records logged on that exact logger, so
    the CLI passes ``on_handlers=True`` to cover every ``phishsafe.*``
    record reaching the root handlers.

    Args:
        logger: Target logger; the root logger when ``None``.
        on_handlers: Attach to each of the logger's handlers instead.
    """
    redactor = RedactingFilter()
    target = logger or logging.getLogger()
    if on_handlers:
        for handler in target.handlers:
            handler.addFilter(redactor)
    else:
        target.addFilter(redactor)
    return redactor
