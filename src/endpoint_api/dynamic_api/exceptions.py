"""The error conditions of the dynamic API.

These are DRF exceptions, so the configured exception handler
(:func:`rest_framework_problem.views.exception_handler`) renders them
as ``application/problem+json`` with the proper status code.
"""
from rest_framework import exceptions, status


class EndpointNotFound(exceptions.NotFound):
    """The endpoint doesn't exist for this owner.
    Endpoints of other owners give the exact same response.
    """

    default_detail = "API endpoint not found."
    default_code = "endpoint_not_found"


class DocumentNotFound(exceptions.NotFound):
    """The document identity is unknown for the endpoint."""

    default_detail = "Data not found."
    default_code = "document_not_found"


class FieldValidationError(exceptions.ValidationError):
    """A field in the payload is missing or has the wrong type."""

    def __init__(self, field_name: str, message: str, code=None):
        super().__init__({field_name: [message]}, code=code)
        self.field_name = field_name
        self.message = message


class RequestValidationError(exceptions.ValidationError):
    """The request itself is malformed (e.g. missing identifier, non-object body)."""

    def __init__(self, message: str, code=None):
        super().__init__(message, code=code)
        self.message = message


class MethodNotAllowed(exceptions.MethodNotAllowed):
    """The HTTP verb is not one of the supported operations."""


class StorageError(exceptions.APIException):
    """The underlying store failed. The details are only logged, never returned."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server error."
    default_code = "storage_error"
