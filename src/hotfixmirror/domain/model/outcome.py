"""Per-item and per-run results reported at the trigger boundary."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from enum import StrEnum


class ItemStatus(StrEnum):
    INGESTED = "ingested"
    ALREADY_EXISTS = "already exists"
    EMPTY_CONTENT = "empty contents"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ItemOutcome:
    filename: str
    status: ItemStatus
    version: str | None = None
    reason: str | None = None

    @property
    def success(self) -> bool:
        return self.status is not ItemStatus.FAILED

    def failed(self, reason: str) -> ItemOutcome:
        return replace(self, status=ItemStatus.FAILED, reason=reason)

    def to_dict(self) -> dict[str, object]:
        if not self.success:
            return {"success": False, "filename": self.filename, "reason": self.reason or ""}
        payload: dict[str, object] = {
            "success": True,
            "filename": self.filename,
            "version": self.version,
        }
        if self.status is not ItemStatus.INGESTED:
            payload["reason"] = self.reason or self.status.value
        return payload


@dataclass(slots=True)
class RunReport:
    """Outcome of one reconciliation run.

    ``success`` is false only when a run-level step aborted the workflow; item
    failures are isolated and visible through ``failed_items``.
    """

    success: bool
    version: str | None = None
    reason: str | None = None
    outcomes: list[ItemOutcome] = field(default_factory=list["ItemOutcome"])

    @property
    def failed_items(self) -> list[ItemOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    @property
    def all_succeeded(self) -> bool:
        return self.success and not self.failed_items

    def counts(self) -> dict[ItemStatus, int]:
        return dict(Counter(outcome.status for outcome in self.outcomes))

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "success": self.success,
            "version": self.version,
            "items": [outcome.to_dict() for outcome in self.outcomes],
        }
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload
