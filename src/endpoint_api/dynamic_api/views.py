"""The REST API view that serves all dynamic endpoints.

There is a single view for ``/api/{endpoint_name}``. It passes every request,
whatever the HTTP verb, to the :class:`~.dispatcher.DynamicDispatcher`.
The dispatcher resolves the endpoint before it decides whether the verb is supported,
so the standard Django/DRF method checks are bypassed here.
"""
from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .dispatcher import DynamicDispatcher, DynamicRequest, Operation
from .permissions import HasOwner


class DynamicEndpointView(APIView):
    """CRUD operations on the documents of a tenant's endpoint."""

    permission_classes = [HasOwner]
    dispatcher_class = DynamicDispatcher

    @property
    def allowed_methods(self):
        """Used for the ``Allow`` header, e.g. in a 405 response."""
        return Operation.allowed_methods()

    def get_dispatcher(self) -> DynamicDispatcher:
        return self.dispatcher_class()

    def handle_dynamic_request(self, request: Request, endpoint_name: str) -> Response:
        result = self.get_dispatcher().dispatch(
            DynamicRequest(
                owner_id=request.user.owner_id,
                endpoint_name=endpoint_name,
                method=request.method,
                document_id=request.query_params.get("id"),
                get_data=lambda: request.data,
            )
        )
        return Response(result.data, status=result.status_code)

    get = post = put = patch = delete = head = options = trace = handle_dynamic_request

    def http_method_not_allowed(self, request, *args, **kwargs):
        # Verbs that Django doesn't know (e.g. PURGE) still need the endpoint lookup first.
        return self.handle_dynamic_request(request, *args, **kwargs)
