"""The schema registry and the document storage.

Endpoint and field definitions are owned by the administrative tooling,
the dynamic API only reads them. Documents are written by the dispatcher,
and hold their data as an opaque JSON blob; there are no per-field columns.
"""
from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class HttpMethod(models.TextChoices):
    """The methods an endpoint can be declared with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class FieldType(models.TextChoices):
    """The closed set of types a field can be declared with."""

    INT = "INT"
    FLOAT = "FLOAT"
    VARCHAR = "VARCHAR"
    TEXT = "TEXT"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    DATETIME = "DATETIME"

    @classmethod
    def parse(cls, type_tag) -> FieldType | None:
        """Translate a stored type tag into the enum, tags are case-insensitive.
        Unknown tags give ``None``.
        """
        if not isinstance(type_tag, str):
            return None
        try:
            return cls(type_tag.strip().upper())
        except ValueError:
            return None


class EndpointDefinition(models.Model):
    """A named resource that a tenant declared, exposed as ``/api/{name}``."""

    owner_id = models.CharField(_("Owner"), max_length=255, db_index=True)
    name = models.CharField(_("Name"), max_length=100)
    declared_method = models.CharField(
        _("Declared method"), max_length=10, choices=HttpMethod.choices
    )

    class Meta:
        ordering = ("owner_id", "name")
        verbose_name = _("Endpoint definition")
        verbose_name_plural = _("Endpoint definitions")
        constraints = [
            models.UniqueConstraint(
                fields=["owner_id", "name"], name="unique_endpoint_name_per_owner"
            ),
        ]

    def __str__(self):
        return self.name


class FieldDefinition(models.Model):
    """A typed attribute of an endpoint's schema."""

    endpoint = models.ForeignKey(
        EndpointDefinition, related_name="fields", on_delete=models.CASCADE
    )
    name = models.CharField(_("Name"), max_length=100)
    # Not restricted at database level; unknown tags are rejected on validation.
    type = models.CharField(_("Type"), max_length=20, choices=FieldType.choices)
    required = models.BooleanField(_("Required"), default=False)
    default = models.JSONField(_("Default value"), null=True, blank=True)

    class Meta:
        ordering = ("endpoint", "id")
        verbose_name = _("Field definition")
        verbose_name_plural = _("Field definitions")
        constraints = [
            models.UniqueConstraint(
                fields=["endpoint", "name"], name="unique_field_name_per_endpoint"
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.type})"

    @property
    def field_type(self) -> FieldType | None:
        return FieldType.parse(self.type)


class Document(models.Model):
    """A single record of an endpoint."""

    endpoint = models.ForeignKey(
        EndpointDefinition, related_name="documents", on_delete=models.CASCADE
    )
    payload = models.JSONField(_("Payload"), default=dict)

    class Meta:
        ordering = ("id",)
        verbose_name = _("Document")
        verbose_name_plural = _("Documents")

    def __str__(self):
        return f"{self.endpoint_id}:{self.pk}"
