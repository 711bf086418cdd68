"""
Unique slug generation.

Titles are sanitised with python-slugify, then checked against the checker
registered for the context until a free candidate is found:

- ``post`` and ``term``: ``my-title``, ``my-title-1``, ``my-title-2``, ...
- ``user``: ``jdoe``, ``jdoe1``, ``jdoe2``, ...
- any other context: the sanitised slug, unchecked.

Lookups are owned by the persistence layer behind each checker; this
service only decides which candidate to ask about next.
"""

from __future__ import annotations

from typing import Mapping

from slugify import slugify

from errors import ValidationError
from infrastructure.slug.protocol import SlugChecker
from shared.logging import get_logger

log = get_logger(__name__)

HYPHENATED_CONTEXTS = ("post", "term")
USER_CONTEXT = "user"


class SlugService:
    def __init__(self, checkers: Mapping[str, SlugChecker]) -> None:
        self._checkers = dict(checkers)

    def unique_slug(
        self, title: str, context: str = "post", type_: str = "post"
    ) -> str:
        """Return a slug for *title* that is free in *context*.

        Args:
            title: Human-readable title.
            context: ``post``, ``term``, ``user`` or a custom label.
            type_: Post type or taxonomy passed to the checker.

        Raises:
            ValidationError: If *title* has no sluggable characters.
            StorageError: If the checker's backing store fails.
        """
        base = slugify(title)
        if not base:
            raise ValidationError("Title produces an empty slug", field="title")

        if context in HYPHENATED_CONTEXTS:
            separator = "-"
        elif context == USER_CONTEXT:
            separator = ""
        else:
            return base

        checker = self._checkers.get(context)
        if checker is None:
            log.warning("slug_checker_missing", context=context)
            return base

        slug = base
        counter = 1
        while checker.exists(slug, type_):
            slug = f"{base}{separator}{counter}"
            counter += 1

        if slug != base:
            log.info(
                "slug_deduplicated", context=context, base=base, attempts=counter - 1
            )
        return slug
