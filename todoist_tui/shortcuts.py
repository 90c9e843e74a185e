"""Key-label text for the platform the app runs on."""

from __future__ import annotations

import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyLabels:
    delete: str


# names the chords the controller binds (alt+backspace, ctrl+w, delete)
DELETE_LABELS = {
    "darwin": "Option+Backspace/Ctrl+W: delete",
}
DEFAULT_DELETE_LABEL = "Alt+Backspace/Ctrl+W: delete"


def key_labels(platform: str | None = None) -> KeyLabels:
    """Resolve labels once at startup from sys.platform (or the given name)."""
    platform = platform or sys.platform
    for prefix, label in DELETE_LABELS.items():
        if platform.startswith(prefix):
            return KeyLabels(delete=label)
    return KeyLabels(delete=DEFAULT_DELETE_LABEL)
