"""Django REST Framework extensions that render errors as RFC 7807 problem documents.

Nothing in here knows about the dynamic endpoints; it can be used by any DRF project
by setting ``REST_FRAMEWORK["EXCEPTION_HANDLER"]`` to
``"rest_framework_problem.views.exception_handler"``.
"""
