"""Data models for pr-picker."""

from models.config_models import Config, CredentialsConfig
from models.data_models import (
    MaterializedPR,
    PRStatus,
    PullRequestRecord,
    Scope,
    Selection,
    SelectionOutcome,
    derive_status,
)

__all__ = [
    "Config",
    "CredentialsConfig",
    "MaterializedPR",
    "PRStatus",
    "PullRequestRecord",
    "Scope",
    "Selection",
    "SelectionOutcome",
    "derive_status",
]
