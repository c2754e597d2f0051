"""Diff the remote catalog against persisted hotfixes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from hotfixmirror.domain.model import CatalogItem


def resolve_change_set(
    items: Iterable[CatalogItem],
    is_persisted: Callable[[str], bool],
) -> list[CatalogItem]:
    """Return the items whose ``hash256`` is not persisted yet, in catalog order.

    Later occurrences of a hash already selected in the same batch are dropped
    too, so one listing can never yield two ingests of the same content.
    """

    selected: list[CatalogItem] = []
    seen: set[str] = set()
    for item in items:
        if item.hash256 in seen:
            continue
        seen.add(item.hash256)
        if is_persisted(item.hash256):
            continue
        selected.append(item)
    return selected
