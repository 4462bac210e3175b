"""
Cross-platform clipboard access.

Reads paste items from and writes entries back to the system clipboard
through one interface per operating system.
"""

from nacoclip.clipboard.base import PlatformClipboard, RawClipboardItem
from nacoclip.clipboard.factory import get_clipboard, get_clipboard_class

__all__ = [
    'PlatformClipboard',
    'RawClipboardItem',
    'get_clipboard',
    'get_clipboard_class',
]
