"""The document store of the dynamic endpoints.

Each document is a JSON blob that belongs to a single endpoint.
Every query is limited to the endpoint that was resolved for the current owner.
No results are cached, each call queries the database.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from .db import StoreHandle
from .exceptions import DocumentNotFound
from .models import Document
from .resolver import ResolvedEndpoint
from .validation import merge_payload

logger = logging.getLogger(__name__)

#: The key that exposes the document identity in read results.
IDENTITY_FIELD = "id"

# Largest value of the BigAutoField primary key.
MAX_DOCUMENT_ID = 2**63 - 1


def parse_document_id(value) -> int:
    """Translate the identity from the query string.
    Anything that isn't a positive integer can't exist in the store.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        document_id = value
    else:
        text = str(value).strip()
        try:
            document_id = int(text) if text.isascii() and text.isdecimal() else 0
        except ValueError:  # too many digits
            raise DocumentNotFound() from None

    if not 0 < document_id <= MAX_DOCUMENT_ID:
        raise DocumentNotFound()
    return document_id


class DocumentStore:
    """Create, read, update and delete the documents of a single endpoint."""

    def __init__(self, handle: StoreHandle, endpoint: ResolvedEndpoint):
        self.handle = handle
        self.endpoint = endpoint

    def get_queryset(self):
        return Document.objects.using(self.handle.alias).filter(endpoint_id=self.endpoint.id)

    def create(self, payload: dict) -> int:
        """Store a new document, and return the generated identity."""
        document = Document.objects.using(self.handle.alias).create(
            endpoint_id=self.endpoint.id, payload=payload
        )
        logger.debug("Created document %s for endpoint %s", document.pk, self.endpoint.name)
        return document.pk

    def read_all(self) -> list[dict]:
        """Return all documents, with their identity merged into the payload.
        When the payload has a key with the same name, the identity wins.
        """
        return [
            {**payload, IDENTITY_FIELD: pk}
            for pk, payload in self.get_queryset().order_by("pk").values_list("pk", "payload")
        ]

    def update(self, document_id, data: Mapping) -> dict:
        """Merge the given fields into an existing document.

        The fields that are present are validated again, the rest keeps its value.
        There is no version check; concurrent updates overwrite each other.

        :raises DocumentNotFound: When the document doesn't exist, before anything is changed.
        """
        document_id = parse_document_id(document_id)
        try:
            existing = self.get_queryset().values_list("payload", flat=True).get(pk=document_id)
        except Document.DoesNotExist:
            raise DocumentNotFound() from None

        payload = merge_payload(self.endpoint.fields, existing or {}, data)
        updated = self.get_queryset().filter(pk=document_id).update(payload=payload)
        if not updated:
            # Removed by another request in the meantime.
            raise DocumentNotFound()
        return payload

    def delete(self, document_id) -> None:
        """Remove a document.

        :raises DocumentNotFound: When nothing was deleted.
        """
        document_id = parse_document_id(document_id)
        deleted, _ = self.get_queryset().filter(pk=document_id).delete()
        if not deleted:
            raise DocumentNotFound()
