from dotstrap.core.steps.default_shell import DefaultShellStep
from dotstrap.core.steps.framework import InstallFrameworkStep
from dotstrap.core.steps.links import LinkFilesStep
from dotstrap.core.steps.local_override import LocalOverrideStep
from dotstrap.core.steps.platform import DetectPlatformStep
from dotstrap.core.steps.preflight import PreflightGuardStep
from dotstrap.core.steps.repository import SyncRepositoryStep
from dotstrap.core.steps.shell import InstallShellStep
from dotstrap.core.steps.tools import VerifyToolsStep

__all__ = [
    "DefaultShellStep",
    "DetectPlatformStep",
    "InstallFrameworkStep",
    "InstallShellStep",
    "LinkFilesStep",
    "LocalOverrideStep",
    "PreflightGuardStep",
    "SyncRepositoryStep",
    "VerifyToolsStep",
]
