"""
Data models for the Forge Deployment Monitor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

DeploymentHandle = Union[str, int]

SUCCESS_STATUSES = frozenset({"finished"})
FAILURE_STATUSES = frozenset({"failed", "failed-build", "cancelled"})


class StatusCategory(Enum):
    """How a remote deployment status affects polling."""

    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILURE = "failure"


class DeploymentState(Enum):
    """States of one monitoring session."""

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self is not DeploymentState.RUNNING


def classify_status(status: Optional[str]) -> StatusCategory:
    """
    Classify a Forge deployment status.

    Unknown values are treated as in progress so new statuses added by
    Forge never end a session early.
    """
    if status in SUCCESS_STATUSES:
        return StatusCategory.SUCCESS
    if status in FAILURE_STATUSES:
        return StatusCategory.FAILURE
    return StatusCategory.IN_PROGRESS


@dataclass(frozen=True)
class SiteRef:
    """Reference to a Forge site."""

    organization: str  # organization slug
    server_id: str
    site_id: str

    @property
    def deployments_path(self) -> str:
        return (
            f"orgs/{self.organization}/servers/{self.server_id}"
            f"/sites/{self.site_id}/deployments"
        )

    def deployment_path(self, deployment_id: DeploymentHandle) -> str:
        return f"{self.deployments_path}/{deployment_id}"

    def deployment_log_path(self, deployment_id: DeploymentHandle) -> str:
        return f"{self.deployment_path(deployment_id)}/log"


@dataclass
class PollResult:
    """What a single poll cycle observed."""

    status: Optional[str] = None  # None when the status fetch failed
    output: Optional[str] = None  # None when the log fetch failed


@dataclass
class DeploymentResult:
    """Result of a monitoring session."""

    deployment_id: DeploymentHandle
    state: DeploymentState
    status: Optional[str] = None  # last observed remote status
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    duration_seconds: Optional[float] = None
    error_message: Optional[str] = None
    output: Optional[str] = None


class LogCursor:
    """Tracks how much of the deployment log has already been shown."""

    def __init__(self):
        self.position = 0

    def advance(self, output: Optional[str]) -> str:
        """
        Return the part of output beyond the cursor and move the cursor.

        A missing, unchanged or shorter log yields "" and leaves the
        cursor where it is.

        Args:
            output: Full deployment log as fetched

        Returns:
            The new suffix, possibly empty
        """
        if not output or len(output) <= self.position:
            return ""

        new_content = output[self.position :]
        self.position = len(output)
        return new_content
