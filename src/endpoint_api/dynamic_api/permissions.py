import logging

from rest_framework import permissions

audit_log = logging.getLogger("endpoint_api.audit")


def log_access(request, access: bool):
    if access:
        audit_log.info(
            "%s %s: access granted for owner %s",
            request.method,
            request.path,
            request.user.owner_id,
        )
    else:
        audit_log.info("%s %s: access denied, no owner", request.method, request.path)


class HasOwner(permissions.BasePermission):
    """Only allow requests that were authenticated as an owner.
    All dynamic endpoints are scoped by this owner.
    """

    def has_permission(self, request, view):
        access = bool(request.user and getattr(request.user, "owner_id", None))
        log_access(request, access)
        return access
