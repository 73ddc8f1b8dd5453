from django.apps import AppConfig


class DynamicAPIApp(AppConfig):
    name = "endpoint_api.dynamic_api"
    label = "dynamic_api"
    verbose_name = "Dynamic API"
    default_auto_field = "django.db.models.BigAutoField"
