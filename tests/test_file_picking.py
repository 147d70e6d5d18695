import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

from firebasemanager.ui.file_picking import UPLOAD_URL_EXPIRES, PickedFileReader


def _picked(name, path=None):
    return SimpleNamespace(files=[SimpleNamespace(name=name, path=path, size=0)])


def _uploaded(name, progress=None, error=None):
    return SimpleNamespace(file_name=name, progress=progress, error=error)


class PickedFileReaderTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.upload_dir = Path(self.tmp.name)
        self.page = MagicMock()
        self.page.web = False
        self.page.overlay = []
        self.page.get_upload_url.return_value = "https://console.example/upload/config.json?sig=x"
        self.read = []
        self.errors = []
        self.reader = PickedFileReader(
            self.page,
            self.upload_dir,
            lambda name, data: self.read.append((name, data)),
            self.errors.append,
        )
        self.reader.picker = MagicMock()

    def test_desktop_pick_reads_local_path(self):
        source = self.upload_dir / "local.json"
        source.write_bytes(b'{"apiKey": "k"}')

        self.reader.on_result(_picked("local.json", str(source)))

        self.assertEqual(self.read, [("local.json", b'{"apiKey": "k"}')])
        self.reader.picker.upload.assert_not_called()

    def test_cancelled_pick_does_nothing(self):
        self.reader.on_result(SimpleNamespace(files=None))
        self.assertEqual(self.read, [])
        self.assertEqual(self.errors, [])

    def test_browser_pick_uploads_to_server_first(self):
        self.page.web = True

        self.reader.on_result(_picked("config.json"))

        self.page.get_upload_url.assert_called_once_with("config.json", UPLOAD_URL_EXPIRES)
        (files,), _ = self.reader.picker.upload.call_args
        self.assertEqual(files[0].name, "config.json")
        self.assertEqual(files[0].upload_url, "https://console.example/upload/config.json?sig=x")
        self.assertEqual(self.read, [])

    def test_finished_browser_upload_is_read_and_removed(self):
        target = self.upload_dir / "config.json"
        target.write_bytes(b"{}")

        self.reader.on_upload(_uploaded("config.json", progress=0.5))
        self.assertEqual(self.read, [])

        self.reader.on_upload(_uploaded("config.json", progress=1.0))
        self.assertEqual(self.read, [("config.json", b"{}")])
        self.assertFalse(target.exists())

    def test_browser_upload_error_is_reported(self):
        with self.assertLogs("firebasemanager.ui.file_picking", level="ERROR"):
            self.reader.on_upload(_uploaded("big.bin", error="Request Entity Too Large"))
        self.assertEqual(self.errors, ["Could not read big.bin: Request Entity Too Large"])
        self.assertEqual(self.read, [])

    def test_missing_path_outside_browser_is_reported(self):
        self.reader.on_result(_picked("config.json"))
        self.assertEqual(self.errors, ["Could not access config.json"])
        self.page.get_upload_url.assert_not_called()

    def test_unreadable_file_is_reported(self):
        with self.assertLogs("firebasemanager.ui.file_picking", level="ERROR"):
            self.reader.on_result(_picked("gone.json", str(self.upload_dir / "gone.json")))
        self.assertEqual(len(self.errors), 1)
        self.assertTrue(self.errors[0].startswith("Could not read gone.json"))


if __name__ == "__main__":
    unittest.main()
