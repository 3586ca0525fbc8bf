"""
Laravel Forge Deployment Monitor.
"""

from clients import ApiResponse, ForgeRestClient
from config import MonitorConfig
from errors import (
    ApiError,
    ApiErrorKind,
    ConfigurationError,
    DeploymentFailedError,
    DeploymentTimeoutError,
    ForgeError,
    MalformedResponseError,
    ResponseParseError,
    TransportError,
)
from log_utils import setup_logging
from models import (
    DeploymentResult,
    DeploymentState,
    LogCursor,
    PollResult,
    SiteRef,
    StatusCategory,
    classify_status,
)
from monitor import DeploymentMonitor

__all__ = [
    "ApiResponse",
    "ForgeRestClient",
    "MonitorConfig",
    "ApiError",
    "ApiErrorKind",
    "ConfigurationError",
    "DeploymentFailedError",
    "DeploymentTimeoutError",
    "ForgeError",
    "MalformedResponseError",
    "ResponseParseError",
    "TransportError",
    "setup_logging",
    "DeploymentResult",
    "DeploymentState",
    "LogCursor",
    "PollResult",
    "SiteRef",
    "StatusCategory",
    "classify_status",
    "DeploymentMonitor",
]
