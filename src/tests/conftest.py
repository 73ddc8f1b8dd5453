from __future__ import annotations

import time

import pytest
from django.conf import settings
from jwcrypto.jwt import JWT
from rest_framework.test import APIClient

from endpoint_api.authentication import get_keyset
from endpoint_api.dynamic_api.models import (
    EndpointDefinition,
    FieldDefinition,
    FieldType,
    HttpMethod,
)


@pytest.fixture()
def api_client() -> APIClient:
    """Return a client without any credentials."""
    return APIClient()


@pytest.fixture()
def fetch_tokendata():
    """Fixture to create valid token data, the owner is flexible"""

    def _fetcher(owner, valid=1800):
        now = int(time.time())
        return {
            "iat": now,
            "exp": now + valid,
            settings.AUTH_OWNER_CLAIM: owner,
        }

    return _fetcher


@pytest.fixture()
def fetch_auth_token(fetch_tokendata):
    """Fixture to create an auth token, the owner is flexible"""

    def _fetcher(owner=settings.TEST_OWNER, **kwargs):
        key = get_keyset().get_key(settings.TEST_KEY_ID)
        token = JWT(
            header={"alg": "ES256", "kid": settings.TEST_KEY_ID},
            claims=fetch_tokendata(owner, **kwargs),
        )
        token.make_signed_token(key)
        return token.serialize()

    return _fetcher


@pytest.fixture()
def owner_client(fetch_auth_token) -> APIClient:
    """A client that is authenticated as the test owner."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {fetch_auth_token()}")
    return client


@pytest.fixture()
def other_owner_client(fetch_auth_token) -> APIClient:
    """A client that is authenticated as a different owner."""
    client = APIClient()
    client.credentials(
        HTTP_AUTHORIZATION=f"Bearer {fetch_auth_token(settings.TEST_OTHER_OWNER)}"
    )
    return client


@pytest.fixture()
def products_endpoint(db) -> EndpointDefinition:
    """An endpoint with all field types, as declared by the test owner."""
    endpoint = EndpointDefinition.objects.create(
        owner_id=settings.TEST_OWNER, name="products", declared_method=HttpMethod.POST
    )
    FieldDefinition.objects.bulk_create(
        [
            FieldDefinition(endpoint=endpoint, name="title", type=FieldType.VARCHAR, required=True),
            FieldDefinition(endpoint=endpoint, name="price", type=FieldType.FLOAT, default=0),
            FieldDefinition(endpoint=endpoint, name="stock", type=FieldType.INT),
            FieldDefinition(endpoint=endpoint, name="active", type=FieldType.BOOLEAN),
            FieldDefinition(endpoint=endpoint, name="notes", type=FieldType.TEXT),
            FieldDefinition(endpoint=endpoint, name="released", type=FieldType.DATE),
            FieldDefinition(endpoint=endpoint, name="updated", type=FieldType.DATETIME),
        ]
    )
    return endpoint


@pytest.fixture()
def other_owner_endpoint(db) -> EndpointDefinition:
    """An endpoint with the same name, owned by someone else."""
    endpoint = EndpointDefinition.objects.create(
        owner_id=settings.TEST_OTHER_OWNER, name="products", declared_method=HttpMethod.GET
    )
    FieldDefinition.objects.create(endpoint=endpoint, name="sku", type=FieldType.VARCHAR)
    return endpoint


@pytest.fixture()
def notes_endpoint(db) -> EndpointDefinition:
    """A minimal endpoint with a single optional text field."""
    endpoint = EndpointDefinition.objects.create(
        owner_id=settings.TEST_OWNER, name="notes", declared_method=HttpMethod.GET
    )
    FieldDefinition.objects.create(endpoint=endpoint, name="body", type=FieldType.TEXT)
    return endpoint
