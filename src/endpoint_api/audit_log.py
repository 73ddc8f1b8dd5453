"""The audit log, a structured trail of who changed which document.

Every write on a dynamic endpoint is logged through :func:`document_changed`.
The messages are JSON encoded, so the audit handler (see ``LOGGING`` in settings.py)
can ship them as-is.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable


def _to_jsonable(x: Any) -> Any:
    """Convert x to a JSON'able object. Default function for JSONEncoder."""
    if isinstance(x, Iterable):
        return tuple(x)
    # Make sure everything is encodable by taking the repr.
    return repr(x)


_encoder = json.JSONEncoder(default=_to_jsonable)

_logger = logging.getLogger("endpoint_api.audit")


def info(**fields):
    """Write an audit record with arbitrary fields."""
    record = {
        "audit": True,
        "level": "INFO",
        "name": _logger.name,
        "time": datetime.now(timezone.utc).isoformat(),
        **fields,
    }
    _logger.info(_encoder.encode(record))


def document_changed(action: str, *, owner: str, endpoint: str, document) -> None:
    """Record a create, update or delete of a document."""
    info(action=action, owner=owner, endpoint=endpoint, document=str(document))
