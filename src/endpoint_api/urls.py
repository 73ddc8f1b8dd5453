import django_healthchecks.urls
from django.urls import include, path

import endpoint_api.dynamic_api.urls
from rest_framework_problem import views

urlpatterns = [
    path("status/health/", include(django_healthchecks.urls)),
    path("api/", include(endpoint_api.dynamic_api.urls)),
]

handler400 = views.bad_request
handler404 = views.not_found
handler500 = views.server_error
