import asyncio
import json
import threading
import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from firebasemanager.services.firestore_service import FirestoreServiceError
from firebasemanager.state.bookmarks import CollectionBookmarks, MemoryStore
from firebasemanager.state.query_explorer import IDLE, QueryExplorer
from firebasemanager.state.session_state import NotReadyError, SessionState


class QueryExplorerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.firestore = MagicMock()
        self.firestore.run_query.return_value = [{"id": "u1", "name": "Ada"}]
        self.session = SessionState(firestore=self.firestore)
        self.bookmarks = CollectionBookmarks(MemoryStore())
        self.explorer = QueryExplorer(self.session, self.bookmarks)

    async def test_requires_collection(self):
        with self.assertRaises(NotReadyError):
            await self.explorer.execute()
        self.firestore.run_query.assert_not_called()

    async def test_requires_database_handle(self):
        explorer = QueryExplorer(SessionState(), self.bookmarks)
        explorer.select_collection("users")
        with self.assertRaises(NotReadyError):
            await explorer.execute()

    async def test_success_replaces_results_and_bookmarks_once(self):
        self.explorer.select_collection("users")
        self.assertTrue(await self.explorer.execute())
        self.assertTrue(await self.explorer.execute())

        self.assertEqual(self.explorer.results, [{"id": "u1", "name": "Ada"}])
        self.assertEqual(self.bookmarks.names.count("users"), 1)
        self.assertEqual(self.explorer.status, IDLE)
        self.assertIsNone(self.explorer.error)

    async def test_query_is_composed_from_panel_state(self):
        self.explorer.select_collection("users")
        self.explorer.add_condition()
        self.explorer.update_condition(0, field="age", operator=">=", value="18")
        self.explorer.add_condition()
        self.explorer.add_order()
        self.explorer.update_order(0, field="age", direction="desc")
        self.explorer.limit_text = "-5"

        await self.explorer.execute()

        structured = self.firestore.run_query.call_args.args[0]
        self.assertEqual(structured["where"]["fieldFilter"]["value"], {"integerValue": "18"})
        self.assertEqual(structured["orderBy"][0]["direction"], "DESCENDING")
        self.assertEqual(structured["limit"], 10)

    async def test_failure_keeps_previous_results(self):
        self.explorer.select_collection("users")
        await self.explorer.execute()
        self.firestore.run_query.side_effect = FirestoreServiceError("Missing or insufficient permissions.")
        self.explorer.select_collection("secrets")

        self.assertFalse(await self.explorer.execute())

        self.assertEqual(self.explorer.error, "Missing or insufficient permissions.")
        self.assertEqual(self.explorer.results, [{"id": "u1", "name": "Ada"}])
        self.assertNotIn("secrets", self.bookmarks)
        self.assertEqual(self.explorer.status, IDLE)

    async def test_stale_response_is_discarded(self):
        gate = threading.Event()

        def run_query(structured, parent=""):
            if structured["limit"] == 1:
                gate.wait(5)
                return [{"id": "old"}]
            return [{"id": "new"}]

        self.firestore.run_query.side_effect = run_query
        self.explorer.select_collection("users")
        self.explorer.limit_text = "1"
        first = asyncio.create_task(self.explorer.execute())
        await asyncio.sleep(0.05)

        self.explorer.limit_text = "2"
        self.assertTrue(await self.explorer.execute())
        gate.set()

        self.assertFalse(await first)
        self.assertEqual(self.explorer.results, [{"id": "new"}])
        self.assertEqual(self.explorer.status, IDLE)

    async def test_subcollection_path_queries_under_parent_document(self):
        self.explorer.select_collection("users/u1/orders")
        self.assertTrue(await self.explorer.execute())

        structured, parent = self.firestore.run_query.call_args.args
        self.assertEqual(structured["from"], [{"collectionId": "orders"}])
        self.assertEqual(parent, "users/u1")
        self.assertIn("users/u1/orders", self.bookmarks)

    async def test_document_path_is_rejected_without_request(self):
        self.explorer.select_collection("users/u1")
        self.assertFalse(await self.explorer.execute())

        self.assertIn("odd number of segments", self.explorer.error)
        self.firestore.run_query.assert_not_called()
        self.assertEqual(self.explorer.status, IDLE)

    def test_empty_dropdown_values_are_ignored(self):
        self.explorer.add_condition()
        self.explorer.add_order()
        self.explorer.update_condition(0, operator="", field="age")
        self.explorer.update_order(0, direction="")

        self.assertEqual(self.explorer.conditions[0].operator, "==")
        self.assertEqual(self.explorer.conditions[0].field, "age")
        self.assertEqual(self.explorer.orders[0].direction, "asc")

    def test_collection_management(self):
        self.assertTrue(self.explorer.add_collection(" users "))
        self.explorer.add_collection("orders")
        self.assertEqual(self.explorer.selected_collection, "orders")

        self.explorer.remove_collection("orders")
        self.assertEqual(self.explorer.selected_collection, "users")

    def test_starts_on_first_bookmark(self):
        self.bookmarks.add("orders")
        self.assertEqual(QueryExplorer(self.session, self.bookmarks).selected_collection, "orders")

    def test_remove_clauses(self):
        self.explorer.add_condition()
        self.explorer.add_order()
        self.explorer.remove_condition(0)
        self.explorer.remove_order(0)
        self.assertEqual(self.explorer.conditions, [])
        self.assertEqual(self.explorer.orders, [])

    def test_results_json(self):
        self.explorer.results = [{"id": "u1", "at": datetime(2024, 1, 1, tzinfo=timezone.utc), "raw": b"\x00"}]
        rendered = json.loads(self.explorer.results_json())
        self.assertEqual(rendered, [{"id": "u1", "at": "2024-01-01T00:00:00+00:00", "raw": "AA=="}])


if __name__ == "__main__":
    unittest.main()
