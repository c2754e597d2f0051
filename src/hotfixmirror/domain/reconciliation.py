"""End-to-end hotfix reconciliation run.

A run is a pure function of "what is persisted" plus "what the catalog lists":
nothing about a partial run is saved, and resuming after a crash means running
the whole workflow again. Every step below is therefore written to converge
when repeated: inserts are guarded by an existence check, repository writes
compare content before committing, and generated documents carry no timestamps.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from hotfixmirror.domain.change_set import resolve_change_set
from hotfixmirror.domain.errors import RunDeadlineExceededError
from hotfixmirror.domain.model import (
    HotfixRecord,
    ItemOutcome,
    ItemStatus,
    RepositoryFile,
    RunReport,
)
from hotfixmirror.domain.steps import Backoff, StepExecutor, StepFailedError, StepPolicy
from hotfixmirror.domain.summary import (
    SUMMARY_PATH,
    branch_placeholder,
    render_stable_summary,
    render_version_summary,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from hotfixmirror.domain.model import CatalogItem, ReleaseVersion
    from hotfixmirror.domain.persistence import HotfixStore
    from hotfixmirror.domain.ports.fetching import CredentialProvider, HotfixCatalog
    from hotfixmirror.domain.ports.mirroring import RepositorySink

log = getLogger(__name__)


def _policy(attempts: int, delay_seconds: float, timeout_minutes: float | None) -> StepPolicy:
    return StepPolicy(
        max_attempts=attempts,
        delay=timedelta(seconds=delay_seconds),
        backoff=Backoff.EXPONENTIAL,
        timeout=timedelta(minutes=timeout_minutes) if timeout_minutes is not None else None,
    )


@dataclass(frozen=True, slots=True)
class WorkflowPolicies:
    """Retry policy of every step of a run."""

    credentials: StepPolicy = field(default_factory=lambda: _policy(3, 2, 2))
    version: StepPolicy = field(default_factory=lambda: _policy(5, 3, 5))
    catalog: StepPolicy = field(default_factory=lambda: _policy(5, 3, 5))
    branches: StepPolicy = field(default_factory=lambda: _policy(5, 5, 5))
    change_set: StepPolicy = field(default_factory=lambda: _policy(3, 2, 2))
    item: StepPolicy = field(default_factory=lambda: _policy(3, 5, 10))
    fetch_content: StepPolicy = field(default_factory=lambda: _policy(3, 3, 5))
    insert: StepPolicy = field(default_factory=lambda: _policy(3, 2, 2))
    mirror: StepPolicy = field(default_factory=lambda: _policy(5, 5, 5))
    summary: StepPolicy = field(default_factory=lambda: _policy(5, 5, 5))


@dataclass(slots=True)
class _RunState:
    started_at: float
    version: ReleaseVersion | None = None
    outcomes: list[ItemOutcome] = field(default_factory=list)
    # repository path -> latest file for that path
    pending: dict[str, RepositoryFile] = field(default_factory=dict)
    # indices into outcomes of every item behind a pending file
    pending_outcomes: list[int] = field(default_factory=list)


class HotfixReconciler:
    """Mirror new upstream hotfixes into the database and the repository."""

    def __init__(
        self,
        *,
        credentials: CredentialProvider,
        catalog: HotfixCatalog,
        store: HotfixStore,
        sink: RepositorySink,
        stable_branch: str,
        repository_url: str,
        executor: StepExecutor | None = None,
        policies: WorkflowPolicies | None = None,
        deadline: timedelta | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._credentials = credentials
        self._catalog = catalog
        self._store = store
        self._sink = sink
        self._stable_branch = stable_branch
        self._repository_url = repository_url
        self._executor = executor or StepExecutor()
        self._policies = policies or WorkflowPolicies()
        self._deadline = deadline
        self._clock = clock

    def run(self) -> RunReport:
        state = _RunState(started_at=self._clock())
        try:
            self._run(state)
        except StepFailedError as exc:
            reason = f"{exc.step_name}: {exc.root_cause}"
            log.error("Run aborted at step %s: %s", exc.step_name, exc.root_cause)
            return self._report(state, success=False, reason=reason)
        except RunDeadlineExceededError as exc:
            log.error("Run aborted: %s", exc)
            return self._report(state, success=False, reason=str(exc))

        report = self._report(state, success=True)
        counts = report.counts()
        log.info(
            "Run finished for version %s: ingested=%s, already_exists=%s, empty=%s, failed=%s",
            report.version,
            counts.get(ItemStatus.INGESTED, 0),
            counts.get(ItemStatus.ALREADY_EXISTS, 0),
            counts.get(ItemStatus.EMPTY_CONTENT, 0),
            counts.get(ItemStatus.FAILED, 0),
        )
        return report

    # Steps -------------------------------------------------------------------

    def _run(self, state: _RunState) -> None:
        policies = self._policies

        self._check_deadline(state)
        token = self._executor.do(
            "get-client-credentials", policies.credentials, self._credentials.get_token
        )

        self._check_deadline(state)
        version = self._executor.do(
            "get-upstream-version", policies.version, lambda: self._catalog.fetch_version(token)
        )
        state.version = version
        log.info("Upstream version is %s", version.label)

        self._check_deadline(state)
        items = self._executor.do(
            "get-hotfix-list", policies.catalog, lambda: self._catalog.list_items(token)
        )
        log.info("Catalog lists %s hotfix(es)", len(items))

        self._check_deadline(state)
        self._executor.do("ensure-branches", policies.branches, lambda: self._ensure_branches(version))
        self._executor.do(
            "push-version-readme",
            policies.branches,
            lambda: self._sink.push_summary_document(
                version.branch_name,
                render_version_summary(version),
                f"Update {SUMMARY_PATH} for version {version.label}",
            ),
        )

        self._check_deadline(state)
        new_items = self._executor.do(
            "resolve-change-set",
            policies.change_set,
            lambda: resolve_change_set(items, self._store.exists),
        )
        log.info("%s of %s hotfix(es) are new", len(new_items), len(items))

        new_ids = {id(item) for item in new_items}
        for item in items:
            if id(item) not in new_ids:
                log.debug("Hotfix %s already exists, skipping", item.filename)
                state.outcomes.append(
                    ItemOutcome(item.filename, ItemStatus.ALREADY_EXISTS, version.label)
                )
                continue
            self._check_deadline(state)
            self._process_item(state, item, token=token, version=version)

        self._mirror_pending(state, version)

        self._check_deadline(state)
        versions = self._executor.do(
            "list-versions", policies.summary, self._store.list_distinct_versions
        )
        self._executor.do(
            "push-readme",
            policies.summary,
            lambda: self._sink.push_summary_document(
                self._stable_branch,
                render_stable_summary(versions, repository_url=self._repository_url),
                f"Update {SUMMARY_PATH} with version list",
            ),
        )

    def _ensure_branches(self, version: ReleaseVersion) -> None:
        for branch in self._branches(version):
            self._sink.ensure_branch(branch, branch_placeholder(branch))

    def _process_item(
        self,
        state: _RunState,
        item: CatalogItem,
        *,
        token: str,
        version: ReleaseVersion,
    ) -> None:
        try:
            outcome, file = self._executor.do(
                f"process-hotfix-{item.filename}",
                self._policies.item,
                lambda: self._ingest(item, token=token, version=version),
            )
        except StepFailedError as exc:
            log.error("Hotfix %s failed: %s", item.filename, exc.root_cause)
            state.outcomes.append(
                ItemOutcome(
                    item.filename,
                    ItemStatus.FAILED,
                    version.label,
                    reason=str(exc.root_cause),
                )
            )
            return

        state.outcomes.append(outcome)
        if file is not None:
            state.pending[file.path] = file
            state.pending_outcomes.append(len(state.outcomes) - 1)

    def _ingest(
        self,
        item: CatalogItem,
        *,
        token: str,
        version: ReleaseVersion,
    ) -> tuple[ItemOutcome, RepositoryFile | None]:
        contents = self._executor.do(
            f"fetch-hotfix-contents-{item.filename}",
            self._policies.fetch_content,
            lambda: self._catalog.fetch_content(token, item.unique_filename),
        )
        if not contents:
            log.warning("Hotfix %s has empty contents, skipping", item.filename)
            return ItemOutcome(item.filename, ItemStatus.EMPTY_CONTENT, version.label), None

        inserted = self._executor.do(
            f"insert-hotfix-to-db-{item.filename}",
            self._policies.insert,
            lambda: self._store.insert(
                HotfixRecord.from_item(item, contents=contents, version=version.label)
            ),
        )
        status = ItemStatus.INGESTED if inserted else ItemStatus.ALREADY_EXISTS
        # mirrored even when another process stored it first: the sink skips identical content
        return (
            ItemOutcome(item.filename, status, version.label),
            RepositoryFile(path=item.repository_path, content=contents),
        )

    def _mirror_pending(self, state: _RunState, version: ReleaseVersion) -> None:
        if not state.pending:
            log.info("No hotfix files to mirror")
            return

        files = list(state.pending.values())
        if len(files) == 1:
            message = f"Update hotfix {files[0].path} for version {version.label}"
        else:
            message = f"Update {len(files)} hotfixes for version {version.label}"

        for branch in self._branches(version):
            self._check_deadline(state)
            try:
                result = self._executor.do(
                    f"push-hotfixes-to-github-{branch}",
                    self._policies.mirror,
                    lambda branch=branch: self._sink.write_files(branch, files, message),
                )
            except StepFailedError as exc:
                reason = f"mirroring to {branch} failed: {exc.root_cause}"
                log.error("%s", reason)
                for index in state.pending_outcomes:
                    if state.outcomes[index].success:
                        state.outcomes[index] = state.outcomes[index].failed(reason)
                continue
            log.info(
                "Mirrored to %s: %s written, %s unchanged",
                branch,
                len(result.written),
                len(result.unchanged),
            )

    # Helpers -----------------------------------------------------------------

    def _branches(self, version: ReleaseVersion) -> list[str]:
        branches = [version.branch_name]
        if self._stable_branch not in branches:
            branches.append(self._stable_branch)
        return branches

    def _check_deadline(self, state: _RunState) -> None:
        if self._deadline is None:
            return
        elapsed = self._clock() - state.started_at
        if elapsed > self._deadline.total_seconds():
            raise RunDeadlineExceededError("run deadline exceeded")

    @staticmethod
    def _report(state: _RunState, *, success: bool, reason: str | None = None) -> RunReport:
        return RunReport(
            success=success,
            version=state.version.label if state.version else None,
            reason=reason,
            outcomes=list(state.outcomes),
        )


__all__ = ["HotfixReconciler", "WorkflowPolicies"]
