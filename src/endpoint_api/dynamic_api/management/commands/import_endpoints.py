import json
from typing import Optional

from django.core.management import BaseCommand, CommandError
from django.db import transaction

from endpoint_api.dynamic_api.models import (
    EndpointDefinition,
    FieldDefinition,
    FieldType,
    HttpMethod,
)


class Command(BaseCommand):
    """Import endpoint definitions for an owner.

    Each file holds one endpoint, or a list of endpoints::

        {
            "name": "products",
            "method": "POST",
            "fields": [
                {"name": "title", "type": "VARCHAR", "required": true},
                {"name": "price", "type": "FLOAT", "default": 0}
            ]
        }

    Fields that exist in the database but are not listed in the file are removed.
    Stored documents are never touched.
    """

    help = "Create or update the endpoint definitions of an owner from JSON files."
    requires_system_checks = []

    def add_arguments(self, parser):
        parser.add_argument("owner", help="Owner (tenant) of the endpoints")
        parser.add_argument("files", nargs="+", help="JSON files with endpoint definitions")

    def handle(self, *args, **options):
        owner_id = options["owner"]
        definitions = []
        for filename in options["files"]:
            self.stdout.write(f"Loading endpoints from {filename}")
            definitions.extend(self.read_file(filename))

        # Check everything first, so a bad file doesn't leave a partial import.
        for definition in definitions:
            self.check_definition(definition)

        with transaction.atomic():
            for definition in definitions:
                self.import_endpoint(owner_id, definition)

    def read_file(self, filename) -> list:
        try:
            with open(filename, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise CommandError(f"Unable to read {filename}: {e}") from e

        return data if isinstance(data, list) else [data]

    def check_definition(self, definition):
        """Validate an endpoint definition before anything is written."""
        if not isinstance(definition, dict):
            raise CommandError(f"Endpoint definition must be an object: {definition!r}")

        name = definition.get("name")
        if not name or not isinstance(name, str) or "/" in name:
            raise CommandError(f"Invalid endpoint name: {name!r}")

        method = definition.get("method", HttpMethod.GET)
        if not isinstance(method, str) or method.upper() not in HttpMethod.values:
            raise CommandError(f"Endpoint '{name}': invalid method {method!r}")

        fields = definition.get("fields", [])
        if not isinstance(fields, list):
            raise CommandError(f"Endpoint '{name}': 'fields' must be a list")

        seen = set()
        for field in fields:
            if not isinstance(field, dict) or not field.get("name"):
                raise CommandError(f"Endpoint '{name}': invalid field {field!r}")
            if field["name"] in seen:
                raise CommandError(f"Endpoint '{name}': duplicate field '{field['name']}'")
            seen.add(field["name"])

            if FieldType.parse(field.get("type")) is None:
                raise CommandError(
                    f"Endpoint '{name}': field '{field['name']}' has unknown type"
                    f" {field.get('type')!r}"
                )

    def import_endpoint(self, owner_id: str, definition: dict) -> Optional[EndpointDefinition]:
        """Create or update a single endpoint, and its fields."""
        method = definition.get("method", HttpMethod.GET).upper()
        endpoint, created = EndpointDefinition.objects.update_or_create(
            owner_id=owner_id,
            name=definition["name"],
            defaults={"declared_method": method},
        )

        fields = definition.get("fields", [])
        field_names = [field["name"] for field in fields]
        removed, _ = endpoint.fields.exclude(name__in=field_names).delete()
        for field in fields:
            FieldDefinition.objects.update_or_create(
                endpoint=endpoint,
                name=field["name"],
                defaults={
                    "type": FieldType.parse(field["type"]).value,
                    "required": bool(field.get("required", False)),
                    "default": field.get("default"),
                },
            )

        action = "Created" if created else "Updated"
        self.stdout.write(f"  {action} {endpoint.name} ({len(fields)} fields)")
        if removed:
            self.stdout.write(f"  Removed {removed} old field(s) from {endpoint.name}")
        return endpoint
