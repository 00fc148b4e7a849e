"""System checks for ownership-guarded views."""

from django.core.checks import Error, register

from access_control.permissions import IsOwnerOrAdmin


@register()
def owner_guarded_views_declare_owner_field(app_configs, **kwargs):
    """Ensure views guarded by IsOwnerOrAdmin declare an ``owner_field``.

    Without it the guard can never match an owner and silently degrades to
    admin-only access. New owner-guarded views must be listed here.
    """
    errors: list[Error] = []

    # Import here to avoid circular imports at module load time.
    from articles.views import ArticleDetailView
    from comments.views import CommentView

    guarded_views = [ArticleDetailView, CommentView]

    for view_cls in guarded_views:
        permission_classes = getattr(view_cls, "permission_classes", [])
        if IsOwnerOrAdmin in permission_classes and not getattr(view_cls, "owner_field", None):
            errors.append(
                Error(
                    f"{view_cls.__name__} uses IsOwnerOrAdmin but does not define owner_field.",
                    obj=view_cls,
                    id="access_control.E001",
                )
            )

    return errors
