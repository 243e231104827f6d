"""In-memory registry of dashboard sessions keyed by session token."""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass, field
from threading import Lock

from src.services.dashboard_state import Action, DashboardState, reduce

logger = logging.getLogger(__name__)


@dataclass
class DashboardSession:
    """One browser's dashboard: its token and current state."""

    token: str
    state: DashboardState = field(default_factory=DashboardState)
    loaded: bool = False
    last_seen: float = field(default_factory=time.time)

    def dispatch(self, action: Action) -> DashboardState:
        """Apply an action and keep the resulting state."""
        self.state = reduce(self.state, action)
        return self.state

    def touch(self) -> None:
        self.last_seen = time.time()

    def is_idle(self, ttl_seconds: int) -> bool:
        return time.time() - self.last_seen > ttl_seconds


@dataclass
class SessionRegistryConfig:
    """Configuration for dashboard session tracking."""

    idle_ttl_seconds: int = 3600
    cleanup_interval_seconds: int = 300

    @classmethod
    def from_settings(cls) -> "SessionRegistryConfig":
        """Create config from application settings."""
        from src.core.config import get_settings
        settings = get_settings()
        return cls(
            idle_ttl_seconds=settings.session_idle_ttl_seconds,
            cleanup_interval_seconds=settings.session_cleanup_interval_seconds,
        )


class SessionRegistry:
    """Thread-safe map of session tokens to dashboard sessions."""

    TOKEN_LENGTH = 64

    def __init__(self, config: SessionRegistryConfig | None = None) -> None:
        self.config = config or SessionRegistryConfig()
        self._sessions: dict[str, DashboardSession] = {}
        self._lock = Lock()
        self._cleanup_task: asyncio.Task | None = None

    async def start_cleanup_task(self) -> None:
        """Start background cleanup task."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info("Dashboard session cleanup task started")

    async def stop_cleanup_task(self) -> None:
        """Stop background cleanup task."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
            logger.info("Dashboard session cleanup task stopped")

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.cleanup_interval_seconds)
            count = self.cleanup()
            if count > 0:
                logger.debug("Dropped %d idle dashboard sessions", count)

    def get(self, token: str | None) -> DashboardSession | None:
        """Look up a live session and mark it as seen."""
        if not token:
            return None
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session.is_idle(self.config.idle_ttl_seconds):
                del self._sessions[token]
                return None
            session.touch()
            return session

    def create(self) -> DashboardSession:
        """Register a fresh session with a random token."""
        token = secrets.token_hex(self.TOKEN_LENGTH // 2)
        session = DashboardSession(token=token)
        with self._lock:
            self._sessions[token] = session
        logger.debug("Created dashboard session %s...", token[:8])
        return session

    def cleanup(self) -> int:
        """Remove idle sessions.

        Returns:
            Number of sessions removed.
        """
        with self._lock:
            idle = [t for t, s in self._sessions.items() if s.is_idle(self.config.idle_ttl_seconds)]
            for token in idle:
                del self._sessions[token]
            return len(idle)

    def clear(self) -> int:
        with self._lock:
            count = len(self._sessions)
            self._sessions.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global singleton instance
_session_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    """Get or create the global session registry."""
    global _session_registry
    if _session_registry is None:
        _session_registry = SessionRegistry(SessionRegistryConfig.from_settings())
    return _session_registry


async def init_session_registry() -> SessionRegistry:
    """Initialize the registry with its cleanup task. Call at app startup."""
    registry = get_session_registry()
    await registry.start_cleanup_task()
    return registry


async def shutdown_session_registry() -> None:
    """Stop the registry cleanup task. Call at app shutdown."""
    global _session_registry
    if _session_registry:
        await _session_registry.stop_cleanup_task()
