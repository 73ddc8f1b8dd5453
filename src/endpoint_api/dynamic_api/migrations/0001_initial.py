import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="EndpointDefinition",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("owner_id", models.CharField(db_index=True, max_length=255, verbose_name="Owner")),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                (
                    "declared_method",
                    models.CharField(
                        choices=[
                            ("GET", "Get"),
                            ("POST", "Post"),
                            ("PUT", "Put"),
                            ("DELETE", "Delete"),
                        ],
                        max_length=10,
                        verbose_name="Declared method",
                    ),
                ),
            ],
            options={
                "verbose_name": "Endpoint definition",
                "verbose_name_plural": "Endpoint definitions",
                "ordering": ("owner_id", "name"),
            },
        ),
        migrations.CreateModel(
            name="FieldDefinition",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("INT", "Int"),
                            ("FLOAT", "Float"),
                            ("VARCHAR", "Varchar"),
                            ("TEXT", "Text"),
                            ("BOOLEAN", "Boolean"),
                            ("DATE", "Date"),
                            ("DATETIME", "Datetime"),
                        ],
                        max_length=20,
                        verbose_name="Type",
                    ),
                ),
                ("required", models.BooleanField(default=False, verbose_name="Required")),
                (
                    "default",
                    models.JSONField(blank=True, null=True, verbose_name="Default value"),
                ),
                (
                    "endpoint",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="fields",
                        to="dynamic_api.endpointdefinition",
                    ),
                ),
            ],
            options={
                "verbose_name": "Field definition",
                "verbose_name_plural": "Field definitions",
                "ordering": ("endpoint", "id"),
            },
        ),
        migrations.CreateModel(
            name="Document",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("payload", models.JSONField(default=dict, verbose_name="Payload")),
                (
                    "endpoint",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="documents",
                        to="dynamic_api.endpointdefinition",
                    ),
                ),
            ],
            options={
                "verbose_name": "Document",
                "verbose_name_plural": "Documents",
                "ordering": ("id",),
            },
        ),
        migrations.AddConstraint(
            model_name="endpointdefinition",
            constraint=models.UniqueConstraint(
                fields=("owner_id", "name"), name="unique_endpoint_name_per_owner"
            ),
        ),
        migrations.AddConstraint(
            model_name="fielddefinition",
            constraint=models.UniqueConstraint(
                fields=("endpoint", "name"), name="unique_field_name_per_endpoint"
            ),
        ),
    ]
