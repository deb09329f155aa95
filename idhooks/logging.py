# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Logging configuration for hook runs.

Hooks log through loguru with keyword extras (hook=..., collaborator=...).
A patcher renders the extras into a single ``fields`` string, masking values
that may carry customer data, and the stderr handler appends it to each line.
"""

import sys
from typing import TYPE_CHECKING

from loguru import logger


if TYPE_CHECKING:
    from loguru import Record


SENSITIVE_EXTRAS = frozenset({"email", "ip_address", "token", "password"})

LOG_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> "
    "<level>{level: <8}</level> "
    "<cyan>{name}</cyan> "
    "{message}"
    "<dim>{extra[fields]}</dim>"
)


def _mask(key: str, value: object) -> object:
    if key not in SENSITIVE_EXTRAS or not isinstance(value, str) or not value:
        return value
    return value[:2] + "***"


def _render_fields(record: "Record") -> None:
    """Collect a record's extras into ``extra['fields']``.

    The format string is static, so the rendered values are never parsed for
    color markup or format fields.
    """
    extra = record["extra"]
    pairs = [f"{key}={_mask(key, value)!r}" for key, value in extra.items() if key != "fields"]
    extra["fields"] = " | " + " ".join(pairs) if pairs else ""


def configure_logging(level: str = "INFO") -> None:
    """Configure loguru for hook runs.

    Replaces every existing handler with one stderr handler.

    Args:
        level: Minimum log level to display (e.g., "DEBUG", "INFO", "WARNING").
    """
    logger.configure(
        handlers=[
            {
                "sink": sys.stderr,
                "level": level.upper(),
                "format": LOG_FORMAT,
                "colorize": True,
            }
        ],
        patcher=_render_fields,
    )
