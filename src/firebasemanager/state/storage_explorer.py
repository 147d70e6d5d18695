"""Controller behind the Cloud Storage browser panel."""

import asyncio
from contextlib import suppress
import logging
import random
from typing import Callable, List, Optional

from firebasemanager.core.progress import TICK_SECONDS, SyntheticProgress
from firebasemanager.core.storage_paths import StorageItem, join_path, name_of, parent_path
from firebasemanager.services.storage_service import StorageService, StorageServiceError
from firebasemanager.state.session_state import SessionState


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class StorageExplorer:
    def __init__(
        self,
        session: SessionState,
        rng: Optional[random.Random] = None,
        tick_seconds: float = TICK_SECONDS,
        settle_seconds: float = 1.0,
    ) -> None:
        self.session = session
        self.current_path = ""
        self.items: List[StorageItem] = []
        self.selected_item: Optional[StorageItem] = None
        self.error: Optional[str] = None
        self.loading = False
        self.uploading = False
        self.progress = SyntheticProgress(rng)
        self.tick_seconds = tick_seconds
        self.settle_seconds = settle_seconds
        self._generation = 0

    async def refresh(self) -> bool:
        storage = self.session.require_storage()
        self._generation += 1
        generation = self._generation
        path = self.current_path
        self.loading = True
        self.error = None
        try:
            listing = await asyncio.to_thread(storage.list_all, path)
            folders = [StorageItem(name=name_of(p), full_path=p, is_folder=True) for p in listing.prefixes]
            files = await asyncio.gather(*(self._describe(storage, p) for p in listing.items))
        except StorageServiceError as exc:
            if generation == self._generation:
                logger.error("Error fetching storage items at %r: %s", path, exc)
                self.error = f"Failed to fetch storage items: {exc}"
            return False
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            return False
        self.items = [*folders, *files]
        return True

    @staticmethod
    async def _describe(storage: StorageService, path: str) -> StorageItem:
        try:
            metadata = await asyncio.to_thread(storage.get_metadata, path)
            url = storage.download_url_for(path, metadata)
        except StorageServiceError as exc:
            logger.warning("Error getting details for %s: %s", path, exc)
            return StorageItem(name=name_of(path), full_path=path)

        size = metadata.get("size")
        return StorageItem(
            name=name_of(path),
            full_path=path,
            download_url=url,
            size=int(size) if size is not None else None,
            content_type=metadata.get("contentType"),
            updated=metadata.get("updated"),
        )

    async def open_folder(self, path: str) -> bool:
        self.current_path = path.strip("/")
        self.selected_item = None
        return await self.refresh()

    async def navigate_up(self) -> bool:
        if not self.current_path:
            return False
        return await self.open_folder(parent_path(self.current_path))

    async def select(self, item: StorageItem) -> None:
        if item.is_folder:
            await self.open_folder(item.full_path)
        else:
            self.selected_item = item

    async def _run_ticker(self, on_progress: Optional[ProgressCallback]) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            value = self.progress.tick()
            if on_progress:
                on_progress(value)

    async def upload(
        self,
        file_name: str,
        data: bytes,
        content_type: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bool:
        """Upload into the current folder while driving the synthetic progress bar."""
        storage = self.session.require_storage()
        path = join_path(self.current_path, file_name)
        self.uploading = True
        self.error = None
        self.progress.reset()

        ticker = asyncio.create_task(self._run_ticker(on_progress))
        try:
            await asyncio.to_thread(storage.upload, path, data, content_type)
        except StorageServiceError as exc:
            logger.error("Error uploading file %s: %s", path, exc)
            self.error = f"Failed to upload file: {exc}"
            self.uploading = False
            self.progress.reset()
            if on_progress:
                on_progress(self.progress.value)
            return False
        finally:
            ticker.cancel()
            with suppress(asyncio.CancelledError):
                await ticker

        self.progress.complete()
        if on_progress:
            on_progress(self.progress.value)
        await asyncio.sleep(self.settle_seconds)
        try:
            await self.refresh()
        finally:
            self.uploading = False
            self.progress.reset()
        return True
