"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from hotfixmirror.adapters.github import GitHubRepositorySink
from hotfixmirror.adapters.sqlalchemy import (
    SqlAlchemyHotfixUnitOfWork,
    SqlAlchemyKeyValueCache,
    configured_engine,
    startup,
)
from hotfixmirror.adapters.upstream import (
    ClientCredentialsProvider,
    UpstreamCatalogClient,
    should_cache_payload,
)
from hotfixmirror.config import get_github_config, get_upstream_config, get_workflow_config
from hotfixmirror.domain.persistence import HotfixStore
from hotfixmirror.domain.ports.unit_of_work import HotfixUnitOfWork
from hotfixmirror.domain.reconciliation import HotfixReconciler
from hotfixmirror.domain.summary import sorted_versions

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from hotfixmirror.config import GitHubConfig, UpstreamConfig, WorkflowConfig
    from hotfixmirror.domain.model import RunReport
    from hotfixmirror.domain.ports.fetching import CredentialProvider, HotfixCatalog
    from hotfixmirror.domain.ports.mirroring import RepositorySink
    from hotfixmirror.domain.steps import StepExecutor

UnitOfWorkFactory = Callable[[], HotfixUnitOfWork]


log = getLogger(__name__)


def _engine() -> Engine:
    return configured_engine() or startup()


def sync_hotfixes(
    *,
    credentials: CredentialProvider | None = None,
    catalog: HotfixCatalog | None = None,
    sink: RepositorySink | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    upstream_config: UpstreamConfig | None = None,
    github_config: GitHubConfig | None = None,
    workflow_config: WorkflowConfig | None = None,
    executor: StepExecutor | None = None,
) -> RunReport:
    """Run one reconciliation against the configured upstream, database and repository."""

    engine = _engine()
    github = github_config or get_github_config()
    workflow = workflow_config or get_workflow_config()
    if credentials is None or catalog is None:
        upstream = upstream_config or get_upstream_config(cache_predicate=should_cache_payload)
        credentials = credentials or ClientCredentialsProvider(
            config=upstream,
            cache=SqlAlchemyKeyValueCache(engine),
        )
        catalog = catalog or UpstreamCatalogClient(resilience=upstream.resilience)

    log.info(
        "Starting hotfix sync into %s (stable branch %s, deadline=%s)",
        github.html_url,
        github.stable_branch,
        workflow.run_deadline,
    )
    reconciler = HotfixReconciler(
        credentials=credentials,
        catalog=catalog,
        store=HotfixStore(unit_of_work_factory or SqlAlchemyHotfixUnitOfWork),
        sink=sink or GitHubRepositorySink(resilience=github.resilience),
        stable_branch=github.stable_branch,
        repository_url=github.html_url,
        executor=executor,
        policies=workflow.policies,
        deadline=workflow.run_deadline,
    )
    return reconciler.run()


def list_versions(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> list[str]:
    """Return the recorded version labels in ascending natural order."""

    _engine()
    store = HotfixStore(unit_of_work_factory or SqlAlchemyHotfixUnitOfWork)
    return sorted_versions(store.list_distinct_versions())
