"""Merge a partial portfolio document over the defaults."""

from __future__ import annotations

from typing import Any

from .schema import (
    SEQUENCE_FIELDS,
    PartialPortfolioDocument,
    PortfolioDocument,
    coerce_partial,
    default_document,
)

_NESTED_INFO_FIELDS = {"social", "stats"}


def merge(partial: Any) -> PortfolioDocument:
    """Combine ``partial`` with the default document.

    Top-level fields present in ``partial`` win over the defaults.
    ``personalInfo`` is merged field by field, and its ``social`` and
    ``stats`` sub-maps key by key, so setting only ``social.github`` keeps
    the default ``social.linkedin``. Sequence fields are replaced as a
    whole when supplied and never spliced.

    Anything that is not an object yields the default document unchanged.
    The function is pure and idempotent.
    """
    base = default_document()
    parsed = coerce_partial(partial)
    if parsed is None:
        return base
    return _apply(base, parsed)


def _apply(base: PortfolioDocument, partial: PartialPortfolioDocument) -> PortfolioDocument:
    updates = {}

    info = partial.personal_info
    if info is not None:
        base_info = base.personal_info
        info_updates = info.model_dump(exclude_none=True, exclude=_NESTED_INFO_FIELDS)
        if info.social is not None:
            info_updates["social"] = base_info.social.model_copy(
                update=info.social.model_dump(exclude_none=True)
            )
        if info.stats is not None:
            info_updates["stats"] = base_info.stats.model_copy(
                update=info.stats.model_dump(exclude_none=True)
            )
        updates["personal_info"] = base_info.model_copy(update=info_updates)

    for name in SEQUENCE_FIELDS:
        items = getattr(partial, name)
        if items is not None:
            updates[name] = [item.model_copy(deep=True) for item in items]

    return base.model_copy(update=updates)
