from os.path import normpath
from typing import Any, Optional
from urllib.parse import urlparse

from django.conf import settings

# The sentry SDK only has internal types (in `_types`),
# so these aliases are used instead.
Event = dict[str, Any]
Hint = dict[str, Any]


def before_send(event: Event, hint: Hint) -> Optional[Event]:
    """Drop events for the paths listed in ``SENTRY_BLOCKED_PATHS``.

    Events that are not tied to a request (e.g. from management commands) are always sent.
    """
    request = event.get("request")
    if not request or not request.get("url"):
        return event

    path = normpath(urlparse(request["url"]).path)
    if any(fragment in path for fragment in settings.SENTRY_BLOCKED_PATHS if fragment):
        return None
    return event
