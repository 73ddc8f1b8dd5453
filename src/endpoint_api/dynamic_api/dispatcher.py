"""The dispatcher that serves the CRUD operations of all dynamic endpoints.

Every request passes the same states:

* resolving the endpoint for the owner (:func:`~.resolver.resolve_endpoint`),
* selecting the operation from the HTTP verb (:class:`Operation`),
* performing it against the :class:`~.storage.DocumentStore`,
* and returning a :class:`DispatchResult` that the view turns into a response.

The endpoint is always resolved first. So an unknown endpoint gives a 404,
even when the HTTP verb isn't supported at all.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

from django.db import DatabaseError
from rest_framework import status

from endpoint_api import audit_log

from .db import connection_scope
from .exceptions import MethodNotAllowed, RequestValidationError, StorageError
from .resolver import resolve_endpoint
from .storage import DocumentStore
from .validation import build_payload

logger = logging.getLogger(__name__)


class Operation(Enum):
    """The supported operations, keyed by their HTTP verb."""

    READ = "GET"
    CREATE = "POST"
    UPDATE = "PUT"
    DELETE = "DELETE"

    @classmethod
    def from_method(cls, method: str) -> Operation | None:
        """Tell which operation a HTTP verb performs, ``None`` when it's not supported."""
        try:
            return cls(method.upper())
        except ValueError:
            return None

    @classmethod
    def allowed_methods(cls) -> list[str]:
        return [operation.value for operation in cls]


@dataclass(frozen=True)
class DynamicRequest:
    """The parts of the HTTP request that the dispatcher needs."""

    owner_id: str
    endpoint_name: str
    method: str
    document_id: str | None = None
    #: Reads the request body. Only called by operations that take a body,
    #: so the body isn't parsed before the endpoint and verb are known.
    get_data: Callable[[], object] = lambda: None


@dataclass(frozen=True)
class DispatchResult:
    status_code: int
    data: object


class DynamicDispatcher:
    """Perform a request on a dynamic endpoint."""

    def __init__(self, using: str | None = None):
        # The database alias, by default the DYNAMIC_API_DATABASE setting.
        self.using = using

    def dispatch(self, request: DynamicRequest) -> DispatchResult:
        """Resolve the endpoint, and run the operation of the HTTP verb.

        :raises EndpointNotFound: The owner has no endpoint with that name.
        :raises MethodNotAllowed: The verb is not one of the supported operations.
        :raises ValidationError: The request or payload is invalid.
        :raises DocumentNotFound: The document identity doesn't exist.
        :raises StorageError: The database failed, all changes are rolled back.
        """
        logger.debug(
            "Dynamic request: %s %s (owner %s)",
            request.method,
            request.endpoint_name,
            request.owner_id,
        )
        try:
            with connection_scope(self.using) as handle:
                endpoint = resolve_endpoint(handle, request.owner_id, request.endpoint_name)

                operation = Operation.from_method(request.method)
                if operation is None:
                    raise MethodNotAllowed(request.method)

                handler = self.handlers[operation]
                return handler(self, DocumentStore(handle, endpoint), request)
        except DatabaseError as e:
            logger.exception(
                "Storage failure during %s %s for owner %s: %s",
                request.method,
                request.endpoint_name,
                request.owner_id,
                e,
            )
            raise StorageError() from e

    def handle_read(self, store: DocumentStore, request: DynamicRequest) -> DispatchResult:
        return DispatchResult(status.HTTP_200_OK, store.read_all())

    def handle_create(self, store: DocumentStore, request: DynamicRequest) -> DispatchResult:
        data = self._get_body(request)
        payload = build_payload(store.endpoint.fields, data)
        document_id = store.create(payload)

        self._audit(store, request, "create", document_id)
        return DispatchResult(
            status.HTTP_201_CREATED, {"message": "Data created successfully.", "id": document_id}
        )

    def handle_update(self, store: DocumentStore, request: DynamicRequest) -> DispatchResult:
        if not request.document_id:
            raise RequestValidationError("Data ID is required for update.", code="required")

        data = self._get_body(request)
        store.update(request.document_id, data)

        self._audit(store, request, "update", request.document_id)
        return DispatchResult(status.HTTP_200_OK, {"message": "Data updated successfully."})

    def handle_delete(self, store: DocumentStore, request: DynamicRequest) -> DispatchResult:
        if not request.document_id:
            raise RequestValidationError("Data ID is required for deletion.", code="required")

        store.delete(request.document_id)

        self._audit(store, request, "delete", request.document_id)
        return DispatchResult(status.HTTP_200_OK, {"message": "Data deleted successfully."})

    #: One handler for each operation.
    handlers = {
        Operation.READ: handle_read,
        Operation.CREATE: handle_create,
        Operation.UPDATE: handle_update,
        Operation.DELETE: handle_delete,
    }

    def _get_body(self, request: DynamicRequest) -> Mapping:
        data = request.get_data()
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise RequestValidationError("Request body must be a JSON object.", code="invalid")
        return data

    def _audit(self, store: DocumentStore, request: DynamicRequest, action: str, document_id):
        audit_log.document_changed(
            action, owner=request.owner_id, endpoint=store.endpoint.name, document=document_id
        )
