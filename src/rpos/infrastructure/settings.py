from __future__ import annotations

import logging
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_RESTAURANT_NAME = "Restaurant"
DEFAULT_RECEIPT_CURRENCY = "USD"


def report_timezone() -> ZoneInfo:
    name = os.getenv("REPORT_TIMEZONE", "UTC")
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning("report_timezone_invalid", extra={"timezone": name})
        return ZoneInfo("UTC")


def admin_emails() -> frozenset[str]:
    raw = os.getenv("ADMIN_EMAILS", "")
    return frozenset(email.strip().lower() for email in raw.split(",") if email.strip())


def restaurant_name() -> str:
    return os.getenv("RESTAURANT_NAME", DEFAULT_RESTAURANT_NAME)


def receipt_currency() -> str:
    return os.getenv("RECEIPT_CURRENCY", DEFAULT_RECEIPT_CURRENCY)
