from __future__ import annotations

import logging
import sys
from typing import TextIO

from .config import settings
from .db import check_db_connection, count_comments, init_db

logger = logging.getLogger("smokecheck.startup")

DATABASE_PROBLEM = "Database problem!"
WEB_SERVER_OK = "Web server OK"


class StartupCheckError(RuntimeError):
    """The store was not in the state the smoke test expects at boot."""


def verify_empty_store() -> int:
    rows = count_comments()
    if rows != 0:
        logger.error(
            "Comments table is not empty at startup",
            extra={"event": "startup_check_failed", "table": "comments", "rows": rows},
        )
        raise StartupCheckError(DATABASE_PROBLEM)
    return rows


def banner_lines(url: str) -> list[str]:
    return [
        "",
        "Database OK",
        "",
        f'Please visit the following address and check that it says "{WEB_SERVER_OK}"',
        "",
        f"  {url}",
        "",
        "Then quit by pressing Ctrl+C",
        "",
    ]


def print_banner(url: str, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    for line in banner_lines(url):
        print(line, file=out)
    out.flush()


def run_startup_sequence() -> None:
    """Open the store, sync the schema, check it is empty and tell the operator what to do next."""
    if not settings.is_memory:
        logger.warning(
            "Store is not in-memory; the empty-table check assumes a fresh database",
            extra={"event": "startup", "db_backend": settings.database_url.split(":", 1)[0]},
        )

    check_db_connection()
    init_db()
    verify_empty_store()

    print_banner(settings.public_url)
