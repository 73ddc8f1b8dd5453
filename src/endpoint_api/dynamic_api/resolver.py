"""Finding the schema for an incoming request."""
from __future__ import annotations

from dataclasses import dataclass

from .db import StoreHandle
from .exceptions import EndpointNotFound
from .models import EndpointDefinition, FieldDefinition


@dataclass(frozen=True)
class ResolvedEndpoint:
    """An endpoint definition that was looked up within an owner scope.

    The document store only accepts these objects,
    so documents can't be reached without passing the owner check first.
    """

    owner_id: str
    definition: EndpointDefinition
    fields: list[FieldDefinition]

    @property
    def id(self) -> int:
        return self.definition.pk

    @property
    def name(self) -> str:
        return self.definition.name


def resolve_endpoint(handle: StoreHandle, owner_id: str, endpoint_name: str) -> ResolvedEndpoint:
    """Find the endpoint with the given name for this owner, including its fields.

    :raises EndpointNotFound: When the owner has no such endpoint.
        Endpoints of other owners are reported the same way as non-existing ones.
    """
    try:
        definition = EndpointDefinition.objects.using(handle.alias).get(
            owner_id=owner_id, name=endpoint_name
        )
    except EndpointDefinition.DoesNotExist:
        raise EndpointNotFound() from None

    fields = list(FieldDefinition.objects.using(handle.alias).filter(endpoint=definition))
    return ResolvedEndpoint(owner_id=owner_id, definition=definition, fields=fields)
