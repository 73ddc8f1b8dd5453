from django.urls import re_path

from . import views

app_name = "dynamic_api"

urlpatterns = [
    # The name is chosen by the tenant, so anything but a slash is accepted.
    re_path(
        r"^(?P<endpoint_name>[^/]+)/?$",
        views.DynamicEndpointView.as_view(),
        name="dynamic-endpoint",
    ),
]
