from dataclasses import dataclass, field
from firebasemanager.state.bookmarks import CollectionBookmarks, MemoryStore
from firebasemanager.state.session_state import SessionState


@dataclass
class AppState:
    session: SessionState = field(default_factory=SessionState)
    bookmarks: CollectionBookmarks = field(default_factory=lambda: CollectionBookmarks(MemoryStore()))
