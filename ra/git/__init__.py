"""Version control and CI status collaborators."""

from .ci import (
    CICheck,
    CIError,
    CIState,
    CIStatus,
    ContinuousIntegrationStatus,
    GitHubCIStatus,
)
from .repository import GitError, GitStatus, Repository, VersionControl

__all__ = [
    # ci
    "CICheck",
    "CIError",
    "CIState",
    "CIStatus",
    "ContinuousIntegrationStatus",
    "GitHubCIStatus",
    # repository
    "GitError",
    "GitStatus",
    "Repository",
    "VersionControl",
]
