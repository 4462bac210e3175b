"""
Platform-specific clipboard factory.

Picks the clipboard implementation for the running operating system. The
platform modules import their native bindings at module level, so they are
only imported here, on demand.
"""

import platform
from typing import Type

from nacoclip.clipboard.base import PlatformClipboard


def get_clipboard_class() -> Type[PlatformClipboard]:
    """
    Get the PlatformClipboard implementation for the current platform.

    Raises:
        NotImplementedError: If the current platform is not supported
    """
    system = platform.system()

    if system == "Windows":
        from nacoclip.clipboard.windows import WindowsClipboard
        return WindowsClipboard
    elif system == "Linux":
        from nacoclip.clipboard.linux import LinuxClipboard
        return LinuxClipboard
    elif system == "Darwin":
        from nacoclip.clipboard.macos import MacOSClipboard
        return MacOSClipboard
    else:
        raise NotImplementedError(f"Platform '{system}' is not supported")


def get_clipboard() -> PlatformClipboard:
    clipboard_class = get_clipboard_class()
    return clipboard_class()
