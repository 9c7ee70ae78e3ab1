"""Port: vhost administration. Implemented by application.vhost.Vhost."""
from __future__ import annotations

from typing import Protocol


class VhostAdmin(Protocol):
    @property
    def name(self) -> str: ...

    async def bounce(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def forewarn(self) -> None: ...

    async def nuke(self) -> None: ...

    async def purge(self) -> None: ...

    async def shutdown(self) -> None: ...
