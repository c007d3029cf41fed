"""Service modules"""

from .scripting import ScriptingService
from .organizations import OrganizationService
from .devices import DeviceService

__all__ = [
    "ScriptingService",
    "OrganizationService",
    "DeviceService",
]
