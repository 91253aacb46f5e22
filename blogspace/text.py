"""
BlogSpace — Slug and Excerpt Derivation
========================================

What:  Pure helpers that derive stored fields from user-entered text.
Who:   Dashboard (blog slugs), Editor (post slugs and excerpts), Home (card
       previews).
"""

import re

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_MARKUP_TAG = re.compile(r"<[^>]*>")

DEFAULT_EXCERPT_LENGTH = 200


def slugify(title: str) -> str:
    """
    Derive a URL-safe slug from a title.

    Lowercases, collapses every run of characters outside [a-z0-9] into a
    single hyphen and trims hyphens at both ends. May return an empty string
    (e.g. for "!!!"); callers decide on a fallback.

        >>> slugify("Hello, World!!")
        'hello-world'
    """
    return _NON_ALNUM_RUN.sub("-", title.lower()).strip("-")


def strip_tags(text: str) -> str:
    """Remove every `<...>` markup tag."""
    return _MARKUP_TAG.sub("", text)


def make_excerpt(content: str, excerpt: str = "", length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """
    Return the excerpt to store for a post.

    A non-empty explicit excerpt is kept verbatim. Otherwise the first
    `length` characters of content are taken and tags are stripped from
    that slice.
    """
    if excerpt:
        return excerpt
    return strip_tags(content[:length])


def preview(content: str, excerpt: str = "", length: int = 150) -> str:
    """Card preview text: the excerpt, or a short tag-free prefix of content."""
    return excerpt or strip_tags(content[:length])
