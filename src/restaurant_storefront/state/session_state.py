"""Per-visitor storefront session state.

Each visitor owns one StorefrontSession holding the selected category, the
active filters and the theme preference. Handlers read and mutate it only
between awaits, so no locking is needed; overlapping catalog requests are
ordered with a monotonic generation counter instead.
"""

import logging
import secrets
from collections import OrderedDict
from dataclasses import dataclass, field

from restaurant_storefront.models.storefront_models import FilterState

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")
DEFAULT_MAX_SESSIONS = 10_000


@dataclass
class StorefrontSession:
    """Client-side selection state for one visitor.

    Attributes:
        current_category: Selected category id, None for all products
        filters: Active attribute filters
        theme: Presentation theme, "light" or "dark"
        generation: Incremented whenever a catalog action starts
    """

    current_category: int | None = None
    filters: FilterState = field(default_factory=FilterState)
    theme: str = "light"
    generation: int = 0

    def select_category(self, category_id: int) -> None:
        """Make category_id the only selected category."""
        self.current_category = category_id

    def clear_category(self) -> None:
        self.current_category = None

    def update_filters(self, filters: FilterState) -> None:
        self.filters = filters

    def reset_filters(self) -> None:
        self.filters = FilterState()

    def begin_request(self) -> int:
        """Start a catalog action and return its generation token."""
        self.generation += 1
        return self.generation

    def is_current(self, token: int) -> bool:
        """True when no newer catalog action started after token."""
        return token == self.generation

    def set_theme(self, theme: str) -> None:
        """Set the theme, falling back to light for unknown values."""
        self.theme = theme if theme in THEMES else "light"

    def toggle_theme(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"
        return self.theme


class SessionStore:
    """In-memory store of visitor sessions keyed by a random session id.

    The store holds at most max_sessions entries. Creating a session beyond
    that evicts the least recently used one; a visitor whose session was
    evicted simply gets a fresh one on the next request.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, StorefrontSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str | None) -> StorefrontSession | None:
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def get_or_create(self, session_id: str | None) -> tuple[str, StorefrontSession, bool]:
        """Look up a session, creating one when the id is missing or unknown.

        Args:
            session_id: Session id from the visitor's cookie, if any

        Returns:
            Tuple of (session_id, session, created)
        """
        session = self.get(session_id)
        if session is not None and session_id is not None:
            return session_id, session, False

        new_id = secrets.token_urlsafe(24)
        session = StorefrontSession()
        self._sessions[new_id] = session
        while len(self._sessions) > self.max_sessions:
            self._sessions.popitem(last=False)
        logger.debug(f"Created storefront session, {len(self._sessions)} active")
        return new_id, session, True
