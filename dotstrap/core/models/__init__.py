"""
Domain models — pydantic types for dotstrap.

    from dotstrap.core.models import Action, Receipt, PlatformInfo, ProvisionConfig
"""

from dotstrap.core.models.action import Action, Receipt
from dotstrap.core.models.config import (
    FrameworkSpec,
    LinkSpec,
    LocalOverrideSpec,
    Policies,
    ProvisionConfig,
    RepoLocation,
)
from dotstrap.core.models.platform import OsKind, PackageManager, PlatformInfo
from dotstrap.core.models.report import ProvisionReport, StepResult
from dotstrap.core.models.state import InstallationState, LinkState

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # config.py
    "FrameworkSpec",
    "LinkSpec",
    "LocalOverrideSpec",
    "Policies",
    "ProvisionConfig",
    "RepoLocation",
    # platform.py
    "OsKind",
    "PackageManager",
    "PlatformInfo",
    # report.py
    "ProvisionReport",
    "StepResult",
    # state.py
    "InstallationState",
    "LinkState",
]
