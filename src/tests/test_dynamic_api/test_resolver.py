import pytest
from django.conf import settings

from endpoint_api.dynamic_api.db import StoreHandle
from endpoint_api.dynamic_api.exceptions import EndpointNotFound
from endpoint_api.dynamic_api.resolver import resolve_endpoint


@pytest.mark.django_db
class TestResolveEndpoint:
    """Prove that endpoints are only found within the owner scope."""

    def test_resolve(self, products_endpoint):
        endpoint = resolve_endpoint(StoreHandle("default"), settings.TEST_OWNER, "products")

        assert endpoint.id == products_endpoint.pk
        assert endpoint.name == "products"
        assert endpoint.owner_id == settings.TEST_OWNER
        assert {field.name for field in endpoint.fields} == {
            "title",
            "price",
            "stock",
            "active",
            "notes",
            "released",
            "updated",
        }

    def test_unknown_name(self, products_endpoint):
        with pytest.raises(EndpointNotFound) as exc_info:
            resolve_endpoint(StoreHandle("default"), settings.TEST_OWNER, "orders")
        assert str(exc_info.value.detail) == "API endpoint not found."

    def test_other_owner(self, products_endpoint):
        """An endpoint of another owner looks exactly like a missing endpoint."""
        with pytest.raises(EndpointNotFound) as exc_info:
            resolve_endpoint(StoreHandle("default"), settings.TEST_OTHER_OWNER, "products")
        assert str(exc_info.value.detail) == "API endpoint not found."

    def test_same_name_per_owner(self, products_endpoint, other_owner_endpoint):
        own = resolve_endpoint(StoreHandle("default"), settings.TEST_OWNER, "products")
        other = resolve_endpoint(StoreHandle("default"), settings.TEST_OTHER_OWNER, "products")

        assert own.id != other.id
        assert [field.name for field in other.fields] == ["sku"]

    def test_name_is_case_sensitive(self, products_endpoint):
        with pytest.raises(EndpointNotFound):
            resolve_endpoint(StoreHandle("default"), settings.TEST_OWNER, "Products")
