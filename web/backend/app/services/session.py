from __future__ import annotations

import asyncio
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from chakra.session import GameSession, new_game

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SESSION_TTL      = 2 * 60 * 60   # 2 hours of inactivity
CLEANUP_INTERVAL = 10 * 60       # run cleanup every 10 minutes


# ---------------------------------------------------------------------------
# Session record
# ---------------------------------------------------------------------------

@dataclass
class Session:
    game: GameSession
    last_turns: list = field(default_factory=list)   # computer turns from the last call
    created_at: float    = field(default_factory=time.time)
    last_accessed: float = field(default_factory=time.time)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)  # one request at a time


# ---------------------------------------------------------------------------
# SessionManager
# ---------------------------------------------------------------------------

class SessionManager:
    """In-memory store of running games, one per browser tab."""

    def __init__(self, rng: Any = None) -> None:
        self._sessions: dict[str, Session] = {}
        self.rng = rng

    def __len__(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(
        self,
        player_count: int,
        human_count: int,
        names: Optional[Sequence[str]] = None,
        colors: Optional[Sequence[str]] = None,
        enable_rotation: bool = False,
    ) -> tuple[str, Session]:
        game = new_game(
            player_count, human_count, names, colors,
            enable_rotation=enable_rotation, rng=self.rng,
        )
        session_id = str(uuid.uuid4())
        session = Session(game=game)
        self._sessions[session_id] = session
        return session_id, session

    def get(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_accessed = time.time()
        return session

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    # ------------------------------------------------------------------
    # TTL cleanup
    # ------------------------------------------------------------------

    def cleanup_stale(self) -> int:
        cutoff = time.time() - SESSION_TTL
        stale = [sid for sid, s in self._sessions.items() if s.last_accessed < cutoff]
        for sid in stale:
            del self._sessions[sid]
        return len(stale)

    async def cleanup_loop(self) -> None:
        """Background coroutine: purge stale sessions every CLEANUP_INTERVAL seconds."""
        while True:
            await asyncio.sleep(CLEANUP_INTERVAL)
            removed = self.cleanup_stale()
            if removed:
                logger.info("Removed %d stale session(s)", removed)


# ---------------------------------------------------------------------------
# Module-level instance (imported by routes)
# ---------------------------------------------------------------------------

session_manager = SessionManager()
