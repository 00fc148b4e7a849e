"""page/limit query parameters shared by the list endpoints."""

from dataclasses import dataclass

MAX_LIMIT = 100


def _positive_int(raw, default: int) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def slice(self, queryset):
        """Apply offset/limit to a queryset or list."""
        return queryset[self.offset:self.offset + self.limit]

    @classmethod
    def from_query(cls, query_params, default_limit: int) -> "PageParams":
        """Read ``page`` and ``limit``; missing, malformed, or non-positive values fall back to defaults."""
        page = _positive_int(query_params.get("page"), 1)
        limit = min(_positive_int(query_params.get("limit"), default_limit), MAX_LIMIT)
        return cls(page=page, limit=limit)


__all__ = ["PageParams"]
