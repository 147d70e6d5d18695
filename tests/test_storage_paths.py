import random
import unittest

from firebasemanager.core.progress import CAP, SyntheticProgress
from firebasemanager.core.storage_paths import as_prefix, format_file_size, join_path, name_of, parent_path


class StoragePathTests(unittest.TestCase):
    def test_join_path(self):
        self.assertEqual(join_path("", "a.txt"), "a.txt")
        self.assertEqual(join_path("docs/", "a.txt"), "docs/a.txt")

    def test_parent_path(self):
        self.assertEqual(parent_path("a/b/c"), "a/b")
        self.assertEqual(parent_path("a"), "")

    def test_name_and_prefix(self):
        self.assertEqual(name_of("a/b/"), "b")
        self.assertEqual(as_prefix(""), "")
        self.assertEqual(as_prefix("a/b"), "a/b/")

    def test_format_file_size(self):
        self.assertEqual(format_file_size(None), "-")
        self.assertEqual(format_file_size(0), "0 Bytes")
        self.assertEqual(format_file_size(1536), "1.5 KB")
        self.assertEqual(format_file_size(5 * 1024 * 1024), "5 MB")


class SyntheticProgressTests(unittest.TestCase):
    def test_never_passes_cap_until_complete(self):
        progress = SyntheticProgress(random.Random(1))
        values = [progress.tick() for _ in range(100)]
        self.assertEqual(max(values), CAP)
        self.assertEqual(values, sorted(values))
        progress.complete()
        self.assertEqual(progress.percent, 100)
        progress.reset()
        self.assertEqual(progress.value, 0.0)


if __name__ == "__main__":
    unittest.main()
