"""Per-request access to the document store database."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass

from django.conf import settings
from django.db import connections, transaction
from django.db.backends.base.base import BaseDatabaseWrapper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreHandle:
    """The database connection that a single request works with.

    It's handed to every component that reads or writes,
    so none of them picks a connection by itself.
    """

    alias: str

    @property
    def connection(self) -> BaseDatabaseWrapper:
        return connections[self.alias]


def get_store_alias() -> str:
    return getattr(settings, "DYNAMIC_API_DATABASE", "default")


@contextmanager
def connection_scope(alias: str | None = None):
    """Acquire the store handle for the duration of a request.

    Everything inside runs in one transaction, so an exception rolls back all writes.
    The connection is released when it's broken or past its lifetime,
    on every way out of the block.
    """
    handle = StoreHandle(alias or get_store_alias())
    try:
        with transaction.atomic(using=handle.alias):
            yield handle
    finally:
        if not handle.connection.in_atomic_block:
            # Also discards connections that errored, so the next request starts fresh.
            handle.connection.close_if_unusable_or_obsolete()
