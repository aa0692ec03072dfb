"""
Settings persistence for the photo layout editor.

Persists the user preferences that survive a session: whether
auto-arrangement is on and which layout new pages use. Any malformed
data falls back to defaults, never an exception at startup.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

from photoprint.core.grid_config import DEFAULT_LAYOUT, SUPPORTED_LAYOUTS

logger = logging.getLogger(__name__)


class SettingsStore(QObject):
    """Lightweight JSON-backed store for persisting editor preferences."""

    autoArrangeChanged = Signal(bool)
    defaultLayoutChanged = Signal(int)
    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self.data: Dict[str, object] = {}
        self._load_error: Optional[str] = None

        if self.path.exists():
            try:
                self.data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                self._load_error = f"Settings file is corrupted:\n{e}"
                self.data = {}
            except OSError as e:
                self._load_error = f"Failed to read settings:\n{e}"
                self.data = {}

        if self._load_error:
            logger.warning(f"Using default settings: {self._load_error}")

        # Ensure version is set for new files
        if "version" not in self._get_dict():
            self.data["version"] = self.CURRENT_VERSION

    @property
    def load_error(self) -> Optional[str]:
        """Why the settings file was discarded, if it was. The host decides whether to tell the user."""
        return self._load_error

    def reset(self) -> None:
        """Discard stored preferences and write defaults."""
        self.data = {"version": self.CURRENT_VERSION}
        self._load_error = None
        self._save()
        self.autoArrangeChanged.emit(True)
        self.defaultLayoutChanged.emit(DEFAULT_LAYOUT)

    def get_auto_arrange(self) -> bool:
        """Get whether auto-arrangement is enabled (default: True)."""
        value = self._get_dict().get("auto_arrange_enabled", True)
        if not isinstance(value, bool):
            return True
        return value

    def set_auto_arrange(self, enabled: bool) -> None:
        """Set whether auto-arrangement is enabled."""
        enabled = bool(enabled)
        if self._get_dict().get("auto_arrange_enabled") == enabled:
            return
        self.data["auto_arrange_enabled"] = enabled
        self._save()
        self.autoArrangeChanged.emit(enabled)

    def get_default_layout(self) -> int:
        """Get the layout used for new pages (default: 4)."""
        return self._safe_layout(self._get_dict().get("default_layout"))

    def set_default_layout(self, layout: int) -> None:
        """
        Set the layout used for new pages.

        Raises:
            ValueError: If layout is not a supported layout identifier
        """
        if layout not in SUPPORTED_LAYOUTS:
            raise ValueError(f"Unsupported layout: {layout}")
        if self._get_dict().get("default_layout") == layout:
            return
        self.data["default_layout"] = layout
        self._save()
        self.defaultLayoutChanged.emit(layout)

    def _safe_layout(self, value: Any) -> int:
        if isinstance(value, int) and not isinstance(value, bool) and value in SUPPORTED_LAYOUTS:
            return value
        return DEFAULT_LAYOUT

    def _get_dict(self) -> Dict[str, object]:
        if not isinstance(self.data, dict):
            self.data = {}
        return self.data

    def _save(self) -> None:
        """Safely write settings with atomic replacement.

        Uses a temp file to prevent corruption if write is interrupted.
        """
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            temp_path = self.path.with_suffix(".tmp")
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")

            # Atomic rename (overwrites existing)
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Failed to save settings: {e}")
            if temp_path is not None and temp_path.exists():
                temp_path.unlink(missing_ok=True)
