"""Reconciliation run settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from hotfixmirror.domain.reconciliation import WorkflowPolicies

from .env import optional_env_float
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class WorkflowConfig:
    policies: WorkflowPolicies = field(default_factory=WorkflowPolicies)
    run_deadline: timedelta | None = None


def get_workflow_config() -> WorkflowConfig:
    deadline_seconds = optional_env_float("HOTFIXMIRROR_RUN_DEADLINE_SECONDS")
    if deadline_seconds is not None and deadline_seconds <= 0:
        raise ConfigurationError("HOTFIXMIRROR_RUN_DEADLINE_SECONDS must be positive")
    return WorkflowConfig(
        run_deadline=timedelta(seconds=deadline_seconds) if deadline_seconds else None,
    )
