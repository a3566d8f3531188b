"""In-memory state for the HTTP API — no database required."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from alias_graph.analysis.alias_dependency import TypeAliasDependency
from alias_graph.environment import Environment


@dataclass
class EnvironmentSession:
    """One uploaded definitions snapshot and the builder bound to it."""
    env: Environment
    builder: TypeAliasDependency
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class AppState:
    """Singleton in-memory state shared by all API routes."""

    def __init__(self):
        self.sessions: dict[str, EnvironmentSession] = {}
        self._lock = threading.Lock()

    def add_environment(self, env: Environment, guarded_recursion: bool = False) -> EnvironmentSession:
        session = EnvironmentSession(
            env=env,
            builder=TypeAliasDependency(env, guarded_recursion=guarded_recursion),
        )
        with self._lock:
            self.sessions[session.id] = session
        return session

    def get(self, env_id: str) -> EnvironmentSession | None:
        return self.sessions.get(env_id)

    def delete(self, env_id: str) -> bool:
        with self._lock:
            return self.sessions.pop(env_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self.sessions.clear()


state = AppState()
