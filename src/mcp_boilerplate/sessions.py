"""Session table for connection-oriented transports.

Copyright (C) 2024 MCP Boilerplate

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

from typing import Dict, Generic, List, Optional, TypeVar

from .errors import SessionLookupError

HandleT = TypeVar("HandleT")

_MISSING = object()


class SessionTable(Generic[HandleT]):
    """Maps session ids to live transport handles.

    Each session moves absent -> active -> absent. None of the methods
    await, so under a single event loop every transition is atomic with
    respect to message routing.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, HandleT] = {}

    def open(self, session_id: str, handle: HandleT) -> None:
        """Register a new session.

        Raises:
            ValueError: If a live session already uses this id.
        """
        if session_id in self._sessions:
            raise ValueError(f"Session {session_id} is already active")
        self._sessions[session_id] = handle

    def get(self, session_id: Optional[str]) -> HandleT:
        """Return the handle for a live session.

        Raises:
            SessionLookupError: If the id is missing, unknown or already closed.
        """
        if not session_id or session_id not in self._sessions:
            raise SessionLookupError(session_id)
        return self._sessions[session_id]

    def close(self, session_id: str) -> bool:
        """Remove a session. Closing an absent session is a no-op.

        Returns:
            True if an entry was removed.
        """
        return self._sessions.pop(session_id, _MISSING) is not _MISSING

    def ids(self) -> List[str]:
        return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
