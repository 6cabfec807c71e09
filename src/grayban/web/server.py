"""
Read-only HTTP API over the blocklists.

Routes:
    GET /               plain-text liveness string
    GET /bannedIDs      JSON array of report-banned ids
    GET /bannedPersons  JSON array of {"id": ..., "level": ...}

Runs on aiohttp inside the bot's event loop. It never writes to the stores,
and a store that cannot be read is served as an empty list.
"""

from __future__ import annotations

from aiohttp import web

from grayban.errors import StorageError
from grayban.repositories.blocklist_repo import PersonStore, ReportStore
from grayban.util.logger import get_logger

logger = get_logger("web_server")

LIVENESS_TEXT = "The Darkness Awaits..."

REPORT_STORE_KEY = web.AppKey("report_store", ReportStore)
PERSON_STORE_KEY = web.AppKey("person_store", PersonStore)


async def handle_index(request: web.Request) -> web.Response:
    return web.Response(text=LIVENESS_TEXT)


async def handle_banned_ids(request: web.Request) -> web.Response:
    store = request.app[REPORT_STORE_KEY]
    try:
        ids = await store.list_ids()
    except StorageError as exc:
        logger.error("[WEB] Report blocklist unavailable, serving empty list: %s", exc)
        ids = []
    return web.json_response(ids)


async def handle_banned_persons(request: web.Request) -> web.Response:
    store = request.app[PERSON_STORE_KEY]
    try:
        persons = [entry.to_dict() for entry in await store.list_all()]
    except StorageError as exc:
        logger.error("[WEB] Person blocklist unavailable, serving empty list: %s", exc)
        persons = []
    return web.json_response(persons)


def create_app(report_store: ReportStore, person_store: PersonStore) -> web.Application:
    """Build the aiohttp application with the stores attached."""
    app = web.Application()
    app[REPORT_STORE_KEY] = report_store
    app[PERSON_STORE_KEY] = person_store
    app.router.add_get("/", handle_index)
    app.router.add_get("/bannedIDs", handle_banned_ids)
    app.router.add_get("/bannedPersons", handle_banned_persons)
    return app


class WebServer:
    """Runs the read API next to the Discord client."""

    def __init__(self, report_store: ReportStore, person_store: PersonStore, host: str = "0.0.0.0", port: int = 3000):
        """
        Initialize web server.

        Args:
            report_store: Report blocklist served at /bannedIDs
            person_store: Person blocklist served at /bannedPersons
            host: Host to bind to
            port: Port to listen on
        """
        self.host = host
        self.port = port
        self.app = create_app(report_store, person_store)
        self.runner: web.AppRunner | None = None

    @property
    def address(self) -> str:
        return f"http://{self.host}:{self.port}"

    async def start(self) -> None:
        """Start the web server."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        logger.info("[WEB] 🚀 Server is running at %s", self.address)

    async def stop(self) -> None:
        """Stop the web server."""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.info("[WEB] Server stopped")
