"""D-Bus service for GUI communication.

D-Bus methods use PascalCase per D-Bus convention, and type signatures
like "s" and "(tb)" are D-Bus protocol types, not Python syntax.
"""

from __future__ import annotations

import asyncio
import json
import logging

from dbus_next.aio import MessageBus
from dbus_next.service import ServiceInterface, method, signal
from dbus_next import BusType

from folderspace.core.controller import RunController
from folderspace.models.run_state import RunSnapshot
from folderspace.settings import Settings

log = logging.getLogger(__name__)

_BUS_NAME = "io.github.folderspace"
_OBJECT_PATH = "/io/github/folderspace"
_INTERFACE = "io.github.folderspace.Analyzer"


# noinspection PyPep8Naming
class FolderSpaceDBusService(ServiceInterface):
    """D-Bus service interface wrapping a single RunController.

    Controller snapshots arrive on scan worker threads and are re-emitted
    as signals on the asyncio loop that owns the bus connection.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, controller: RunController | None = None) -> None:
        super().__init__(_INTERFACE)
        self._loop = loop
        self._controller = controller or RunController(
            include_hidden=bool(Settings.instance().get("scan.include_hidden")),
        )
        self._controller.subscribe(self._on_snapshot)

    def _on_snapshot(self, snapshot: RunSnapshot) -> None:
        self._loop.call_soon_threadsafe(self._emit_snapshot, snapshot)

    def _emit_snapshot(self, snapshot: RunSnapshot) -> None:
        self.LoadingChanged(snapshot.run_id, snapshot.is_loading)
        if not snapshot.is_loading:
            self.ReportPublished(snapshot.run_id, json.dumps(snapshot.report.as_dict()))

    @method()
    def Start(self, path: "s") -> "t":  # type: ignore[override]
        """Start analyzing *path*, superseding any scan in progress."""
        return self._controller.start(path)

    @method()
    def Cancel(self):  # type: ignore[override]
        """Cancel the scan in progress, if any."""
        self._controller.cancel()

    @method()
    def GetState(self) -> "s":  # type: ignore[override]
        """Current loading flag and last published report as JSON."""
        return json.dumps(self._controller.snapshot.as_dict())

    @signal()
    def LoadingChanged(self, run_id: int, is_loading: bool) -> "(tb)":  # type: ignore[override]
        return [run_id, is_loading]

    @signal()
    def ReportPublished(self, run_id: int, report_json: str) -> "(ts)":  # type: ignore[override]
        return [run_id, report_json]


async def run_service() -> None:
    """Start the D-Bus service."""
    bus = await MessageBus(bus_type=BusType.SESSION).connect()
    service = FolderSpaceDBusService(asyncio.get_running_loop())
    bus.export(_OBJECT_PATH, service)
    await bus.request_name(_BUS_NAME)
    log.info("D-Bus service started on %s", _BUS_NAME)
    await bus.wait_for_disconnect()


def start_service() -> None:
    """Entry point to start the D-Bus service."""
    asyncio.run(run_service())
