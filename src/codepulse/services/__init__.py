"""Services for codepulse."""

from codepulse.services.tracker import Tracker
from codepulse.services.session_manager import SessionManager
from codepulse.services.metrics_aggregator import MetricsAggregator
from codepulse.services.debouncer import Debouncer
from codepulse.services.scheduler import Scheduler, ScheduledTask
from codepulse.services.transport import TransportClient
from codepulse.services.project_resolver import ProjectResolver
from codepulse.services.git_inspector import (
    GitInspector,
    FileGitInspector,
    SubprocessGitInspector,
)
from codepulse.services.config_manager import ConfigManager, TrackerSettings

__all__ = [
    "Tracker",
    "SessionManager",
    "MetricsAggregator",
    "Debouncer",
    "Scheduler",
    "ScheduledTask",
    "TransportClient",
    "ProjectResolver",
    "GitInspector",
    "FileGitInspector",
    "SubprocessGitInspector",
    "ConfigManager",
    "TrackerSettings",
]
