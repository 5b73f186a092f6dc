import os
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import EditorSettings
from settings_manager import SettingsManager


class TestSettingsManager(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.ini_path = os.path.join(self.tmp_dir, "settings.ini")

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_defaults_when_empty(self):
        settings = SettingsManager.from_file(self.ini_path).load()
        self.assertEqual(settings, EditorSettings())

    def test_save_and_reload(self):
        manager = SettingsManager.from_file(self.ini_path)
        manager.save(EditorSettings(
            description_sources=["/data/params, v2.json", "/opt/defaults.json"],
            recent_files=["a.xml"],
            max_recent_files=5,
            default_export_name="out.xml",
        ))

        reloaded = SettingsManager.from_file(self.ini_path).load()
        self.assertEqual(reloaded.description_sources, ["/data/params, v2.json", "/opt/defaults.json"])
        self.assertEqual(reloaded.recent_files, ["a.xml"])
        self.assertEqual(reloaded.max_recent_files, 5)
        self.assertEqual(reloaded.default_export_name, "out.xml")

    def test_recent_files_most_recent_first(self):
        manager = SettingsManager.from_file(self.ini_path)
        manager.save(EditorSettings(max_recent_files=2))
        manager.add_recent_file("a.xml")
        manager.add_recent_file("b.xml")
        manager.add_recent_file("a.xml")
        settings = manager.add_recent_file("c.xml")
        self.assertEqual(settings.recent_files, ["c.xml", "a.xml"])
        self.assertEqual(manager.load().recent_files, ["c.xml", "a.xml"])

    def test_corrupt_values_fall_back(self):
        manager = SettingsManager.from_file(self.ini_path)
        manager.settings.setValue("files/recent", "{oops")
        manager.settings.setValue("files/max_recent", "lots")
        settings = manager.load()
        self.assertEqual(settings.recent_files, [])
        self.assertEqual(settings.max_recent_files, 10)


class TestEditorSettings(unittest.TestCase):
    def test_remove_recent_file(self):
        settings = EditorSettings(recent_files=["a.xml", "b.xml"])
        settings.remove_recent_file("a.xml")
        settings.remove_recent_file("zzz.xml")
        self.assertEqual(settings.recent_files, ["b.xml"])


if __name__ == '__main__':
    unittest.main()
