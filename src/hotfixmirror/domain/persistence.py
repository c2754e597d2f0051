"""Persistence sink: guarded inserts of hotfix records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from hotfixmirror.domain.model import is_known_version

if TYPE_CHECKING:
    from collections.abc import Callable

    from hotfixmirror.domain.model import HotfixRecord
    from hotfixmirror.domain.ports.unit_of_work import HotfixUnitOfWork

log = getLogger(__name__)


class HotfixStore:
    """Application-level dedup on ``hash256`` on top of a unit of work.

    Every operation opens its own unit of work, so each call is a complete,
    independently retryable transaction.
    """

    def __init__(self, unit_of_work_factory: Callable[[], HotfixUnitOfWork]) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def exists(self, hash256: str) -> bool:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.hotfixes.exists(hash256)

    def insert(self, record: HotfixRecord) -> bool:
        """Insert ``record`` unless its hash is already stored; return whether it was added.

        The existence check and the insert share a transaction but take no lock,
        so two overlapping runs can still both insert the same hash.
        """

        with self._unit_of_work_factory() as uow:
            repository = uow.repositories.hotfixes
            if repository.exists(record.hash256):
                log.warning(
                    "Hotfix %s (%s) was inserted by another process, skipping insert",
                    record.filename,
                    record.hash256,
                )
                return False
            repository.add(record)
            uow.commit()
        log.info("Stored hotfix %s for version %s", record.filename, record.version)
        return True

    def list_distinct_versions(self) -> list[str]:
        with self._unit_of_work_factory() as uow:
            versions = uow.repositories.hotfixes.distinct_versions()
        return [version for version in versions if is_known_version(version)]
