"""Statement audit log.

Every modifying statement (INSERT/UPDATE/DELETE) executed through an engine
with auditing attached is written as a ``db_audit`` log event. Reads are
never audited.
"""

import json
import re
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

from plm.infra.logging import get_logger

logger = get_logger(__name__)

_MODIFYING = re.compile(r"^\s*(INSERT|UPDATE|DELETE)\b", re.IGNORECASE)

STATEMENT_PREVIEW_CHARS = 200
PARAMS_PREVIEW_CHARS = 100


def is_modifying(statement: str) -> bool:
    """Return True for INSERT, UPDATE and DELETE statements."""
    return bool(_MODIFYING.match(statement))


def _preview_params(parameters: Any) -> str | None:
    if parameters is None:
        return None
    try:
        rendered = json.dumps(parameters, default=str)
    except (TypeError, ValueError):
        rendered = repr(parameters)
    return rendered[:PARAMS_PREVIEW_CHARS]


def _before_cursor_execute(
    conn: Any,
    cursor: Any,
    statement: str,
    parameters: Any,
    context: Any,
    executemany: bool,
) -> None:
    if not is_modifying(statement):
        return
    logger.info(
        "db_audit",
        query=" ".join(statement.split())[:STATEMENT_PREVIEW_CHARS],
        values=_preview_params(parameters),
        executemany=executemany,
    )


def attach_statement_audit(engine: AsyncEngine) -> None:
    """Register the audit listener on an async engine."""
    target = engine.sync_engine
    if not event.contains(target, "before_cursor_execute", _before_cursor_execute):
        event.listen(target, "before_cursor_execute", _before_cursor_execute)
        logger.debug("Statement audit attached", url=engine.url.render_as_string(hide_password=True))
