"""Role and ownership permission classes guarding the CMS endpoints."""

from rest_framework import permissions

from authentication.models import Role


def is_admin(user) -> bool:
    return bool(
        user is not None
        and getattr(user, "is_authenticated", False)
        and getattr(user, "role", None) == Role.ADMIN
    )


class IsAdmin(permissions.BasePermission):
    """Allow only authenticated accounts with the admin role.

    Anonymous requests fail ``has_permission`` and surface as 401 through the
    authenticator; authenticated non-admins get 403.
    """

    message = "Administrator rights are required."

    def has_permission(self, request, view) -> bool:
        return is_admin(getattr(request, "user", None))


class IsOwnerOrAdmin(permissions.BasePermission):
    """Allow object access to its owner or to an admin.

    The view names the attribute holding the owner via ``owner_field``
    (``"author"`` for articles and comments). Requests must be authenticated
    before any object is looked up.
    """

    message = "Only the owner or an administrator may modify this resource."

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        return bool(user and getattr(user, "is_authenticated", False))

    def has_object_permission(self, request, view, obj) -> bool:
        if is_admin(request.user):
            return True
        return self._is_owner(obj, request, getattr(view, "owner_field", None))

    @staticmethod
    def _is_owner(obj, request, owner_field) -> bool:
        if not owner_field:
            return False
        owner_id = getattr(obj, f"{owner_field}_id", None)
        return bool(owner_id is not None and owner_id == request.user.pk)


__all__ = ["IsAdmin", "IsOwnerOrAdmin", "is_admin"]
