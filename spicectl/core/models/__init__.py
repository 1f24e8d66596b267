"""
Domain models — Pydantic types for spicectl.

All models are re-exported here for convenient access:

    from spicectl.core.models import OperationRecord, LifecycleStatus, ToolConfig
"""

from spicectl.core.models.config import HostApp, ToolConfig
from spicectl.core.models.operation import (
    OperationKind,
    OperationRecord,
    OperationStatus,
)
from spicectl.core.models.process import ProcessResult
from spicectl.core.models.settings import AppSettings
from spicectl.core.models.status import LifecycleStatus, StatusState

__all__ = [
    # config.py
    "HostApp",
    "ToolConfig",
    # operation.py
    "OperationKind",
    "OperationRecord",
    "OperationStatus",
    # process.py
    "ProcessResult",
    # settings.py
    "AppSettings",
    # status.py
    "LifecycleStatus",
    "StatusState",
]
