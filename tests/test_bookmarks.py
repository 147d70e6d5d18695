import json
import unittest

from firebasemanager.state.bookmarks import STORAGE_KEY, CollectionBookmarks, MemoryStore


class CollectionBookmarksTests(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()

    def test_add_is_distinct_and_ordered(self):
        bookmarks = CollectionBookmarks(self.store)
        self.assertTrue(bookmarks.add("users"))
        self.assertTrue(bookmarks.add("orders"))
        self.assertFalse(bookmarks.add("users"))

        self.assertEqual(bookmarks.names, ["users", "orders"])
        self.assertEqual(json.loads(self.store.get(STORAGE_KEY)), ["users", "orders"])

    def test_persists_across_instances(self):
        CollectionBookmarks(self.store).add("users")
        self.assertIn("users", CollectionBookmarks(self.store))

    def test_remove_last_is_persisted(self):
        bookmarks = CollectionBookmarks(self.store)
        bookmarks.add("users")
        self.assertTrue(bookmarks.remove("users"))
        self.assertFalse(bookmarks.remove("users"))
        self.assertEqual(CollectionBookmarks(self.store).names, [])

    def test_corrupt_data_is_ignored(self):
        self.store.set(STORAGE_KEY, "{broken")
        with self.assertLogs("firebasemanager.state.bookmarks", level="ERROR"):
            self.assertEqual(len(CollectionBookmarks(self.store)), 0)

    def test_accepts_decoded_list_and_drops_duplicates(self):
        self.store.set(STORAGE_KEY, ["users", "users", 3, "orders"])
        self.assertEqual(CollectionBookmarks(self.store).names, ["users", "orders"])


if __name__ == "__main__":
    unittest.main()
