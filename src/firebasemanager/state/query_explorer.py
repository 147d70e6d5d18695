"""Controller behind the Firestore query builder panel."""

import asyncio
from dataclasses import replace
import json
import logging
from typing import Any, Dict, List, Optional

from firebasemanager.core.firestore_encoding import to_jsonable
from firebasemanager.core.query import (
    DEFAULT_LIMIT,
    QueryCondition,
    QueryOrder,
    build_query,
    parse_limit,
    split_collection_path,
)
from firebasemanager.services.firestore_service import FirestoreServiceError
from firebasemanager.state.bookmarks import CollectionBookmarks
from firebasemanager.state.session_state import NotReadyError, SessionState


logger = logging.getLogger(__name__)

IDLE = "idle"
EXECUTING = "executing"


class QueryExplorer:
    def __init__(self, session: SessionState, bookmarks: CollectionBookmarks) -> None:
        self.session = session
        self.bookmarks = bookmarks
        names = bookmarks.names
        self.selected_collection = names[0] if names else ""
        self.conditions: List[QueryCondition] = []
        self.orders: List[QueryOrder] = []
        self.limit_text = str(DEFAULT_LIMIT)
        self.results: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.status = IDLE
        self._generation = 0

    @property
    def is_executing(self) -> bool:
        return self.status == EXECUTING

    def select_collection(self, name: str) -> None:
        self.selected_collection = name.strip()

    def add_collection(self, name: str) -> bool:
        name = name.strip()
        if not name:
            return False
        added = self.bookmarks.add(name)
        self.selected_collection = name
        return added

    def remove_collection(self, name: str) -> None:
        self.bookmarks.remove(name)
        if self.selected_collection == name:
            names = self.bookmarks.names
            self.selected_collection = names[0] if names else ""

    def add_condition(self) -> QueryCondition:
        condition = QueryCondition()
        self.conditions.append(condition)
        return condition

    def update_condition(self, index: int, **changes: str) -> QueryCondition:
        # a cleared dropdown reports no value; keep the current operator
        if not changes.get("operator", True):
            del changes["operator"]
        self.conditions[index] = replace(self.conditions[index], **changes)
        return self.conditions[index]

    def remove_condition(self, index: int) -> None:
        del self.conditions[index]

    def add_order(self) -> QueryOrder:
        order = QueryOrder()
        self.orders.append(order)
        return order

    def update_order(self, index: int, **changes: str) -> QueryOrder:
        if not changes.get("direction", True):
            del changes["direction"]
        self.orders[index] = replace(self.orders[index], **changes)
        return self.orders[index]

    def remove_order(self, index: int) -> None:
        del self.orders[index]

    def build(self) -> Dict[str, Any]:
        return build_query(
            self.selected_collection.strip(),
            list(self.conditions),
            list(self.orders),
            parse_limit(self.limit_text),
        )

    async def execute(self) -> bool:
        """Run the composed query once.

        Only the most recent execution may touch ``results``/``error``; an
        older one that settles late is dropped.
        """
        collection = self.selected_collection.strip()
        if not collection:
            raise NotReadyError("Please select or enter a collection name first.")
        firestore = self.session.require_firestore()
        try:
            parent, _ = split_collection_path(collection)
        except ValueError as exc:
            self.error = str(exc)
            return False
        structured = self.build()

        self._generation += 1
        generation = self._generation
        self.status = EXECUTING
        self.error = None

        try:
            results = await asyncio.to_thread(firestore.run_query, structured, parent)
        except FirestoreServiceError as exc:
            if generation == self._generation:
                logger.error("Error executing query on %s: %s", collection, exc)
                self.error = str(exc) or "Failed to execute query"
            return False
        finally:
            if generation == self._generation:
                self.status = IDLE

        if generation != self._generation:
            logger.debug("Discarding stale results for %s", collection)
            return False

        self.results = results
        self.bookmarks.add(collection)
        return True

    def results_json(self) -> str:
        return json.dumps(to_jsonable(self.results), indent=2, ensure_ascii=False)
