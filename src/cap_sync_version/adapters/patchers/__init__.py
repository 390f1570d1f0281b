"""Version field patchers for native project files.

Each patcher finds known keys and replaces only their value tokens; the rest
of the file is kept byte-for-byte.
"""

from cap_sync_version.adapters.patchers.gradle import patch_gradle
from cap_sync_version.adapters.patchers.pbxproj import patch_project_descriptor
from cap_sync_version.adapters.patchers.plist import patch_plist

__all__ = [
    "patch_gradle",
    "patch_plist",
    "patch_project_descriptor",
]
