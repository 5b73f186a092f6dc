"""
Persistent editor settings stored through QSettings.

The saved description sources feed XmlDocumentManager.load_settings_descriptions.
"""

import json
from typing import List, Optional

from PyQt6.QtCore import QSettings

from models import EditorSettings

ORGANIZATION = "attribxml.dev"
APPLICATION = "AttributeXmlEditor"


class SettingsManager:
    """Persists EditorSettings through QSettings"""

    def __init__(self, settings: Optional[QSettings] = None):
        self.settings = settings if settings is not None else QSettings(ORGANIZATION, APPLICATION)

    @classmethod
    def from_file(cls, file_path: str) -> 'SettingsManager':
        """Settings stored in an explicit INI file"""
        return cls(QSettings(file_path, QSettings.Format.IniFormat))

    def _read_list(self, key: str) -> List[str]:
        raw = self.settings.value(key, "[]")
        try:
            values = json.loads(raw) if isinstance(raw, str) else raw
        except ValueError as e:
            print(f"Error reading setting '{key}': {e}")
            return []
        if not isinstance(values, list):
            return []
        return [str(v) for v in values]

    def _read_int(self, key: str, default: int) -> int:
        raw = self.settings.value(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except (TypeError, ValueError):
            print(f"Error reading setting '{key}': {raw!r} is not a number")
            return default

    def load(self) -> EditorSettings:
        defaults = EditorSettings()
        settings = EditorSettings(
            description_sources=self._read_list("descriptions/sources"),
            recent_files=self._read_list("files/recent"),
            max_recent_files=self._read_int("files/max_recent", defaults.max_recent_files),
            default_export_name=str(self.settings.value("export/default_name",
                                                        defaults.default_export_name)),
        )
        if len(settings.recent_files) > settings.max_recent_files:
            settings.recent_files = settings.recent_files[:settings.max_recent_files]
        return settings

    def save(self, editor_settings: EditorSettings):
        self.settings.setValue("descriptions/sources", json.dumps(editor_settings.description_sources))
        self.settings.setValue("files/recent", json.dumps(editor_settings.recent_files))
        self.settings.setValue("files/max_recent", editor_settings.max_recent_files)
        self.settings.setValue("export/default_name", editor_settings.default_export_name)
        self.settings.sync()

    def add_recent_file(self, file_path: str) -> EditorSettings:
        """Record an opened file and persist the updated list"""
        editor_settings = self.load()
        editor_settings.add_recent_file(file_path)
        self.save(editor_settings)
        return editor_settings
