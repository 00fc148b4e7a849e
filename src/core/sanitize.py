"""Allow-list HTML sanitizers for user-supplied titles, bodies, and comments."""

import nh3
from django.utils.html import strip_tags

BODY_TAGS = {
    "p", "br", "strong", "b", "em", "i", "u", "s", "blockquote", "code", "pre",
    "ul", "ol", "li", "h2", "h3", "h4", "a",
}
COMMENT_TAGS = {"a", "b", "strong", "i", "em", "br", "code"}
LINK_ATTRIBUTES = {"a": {"href", "title"}}
LINK_REL = "noopener noreferrer nofollow"


def sanitize_title(value: str) -> str:
    """Strip every tag, keeping the text."""
    return nh3.clean(str(value), tags=set(), attributes={}).strip()


def sanitize_body(value: str) -> str:
    """Keep basic formatting and links; drop scripts, styles, and handlers."""
    return nh3.clean(
        str(value),
        tags=BODY_TAGS,
        attributes=LINK_ATTRIBUTES,
        url_schemes={"http", "https", "mailto"},
        link_rel=LINK_REL,
    )


def sanitize_comment(value: str) -> str:
    """Keep inline formatting; links open in a new tab."""
    return nh3.clean(
        str(value),
        tags=COMMENT_TAGS,
        attributes=LINK_ATTRIBUTES,
        url_schemes={"http", "https"},
        link_rel=LINK_REL,
        set_tag_attribute_values={"a": {"target": "_blank"}},
    ).strip()


def plain_text(value: str) -> str:
    """Text left once all markup is removed."""
    return strip_tags(value).strip()


__all__ = ["sanitize_title", "sanitize_body", "sanitize_comment", "plain_text"]
