"""
Grayban Discord Moderation Bot
==============================

Maintains a report blocklist and a person blocklist, lets administrators
edit them with chat commands, removes messages that mention report-banned
ids, and serves both lists over a small read-only HTTP API.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. GRAYBAN_HOME environment variable, if set.
    2. If running frozen (PyInstaller, Nuitka), the executable's directory.
    3. Otherwise the repository root (two levels above this package).
    """
    if env_home := os.getenv("GRAYBAN_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord
from dotenv import load_dotenv

from grayban.bot.cogs.events_listener import PRESENCE_ACTIVITY, PRESENCE_STATUS
from grayban.configuration.app_configuration import AppConfig, app_config
from grayban.database.db_connection import ConnectionManager
from grayban.moderation.command_dispatcher import CommandDispatcher
from grayban.moderation.moderation_pipeline import ModerationPipeline, TriggerReply
from grayban.repositories.blocklist_repo import PersonStore, ReportStore
from grayban.ui.console import ConsoleControl, close_bot_instance, console_session
from grayban.util.logger import get_logger, handle_exception
from grayban.web.server import WebServer


logger = get_logger("main")

DEFAULT_PORT = 3000
RESTART_EXIT_CODE = 42


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Returns
    -------
    str
        Discord bot token from ``BOT_TOKEN`` (or ``DISCORD_BOT_TOKEN``).

    Raises
    ------
    SystemExit
        If neither variable is set.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("BOT_TOKEN") or os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def load_port() -> int:
    """Return the HTTP listen port from ``PORT``, defaulting to 3000."""
    raw = os.getenv("PORT")
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        logger.error("PORT=%r is not an integer; using %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT


def build_intents() -> discord.Intents:
    """Construct the Discord intents required to read guild messages.

    Returns
    -------
    discord.Intents
        Intents enabling guild, guild message, and message content events.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    return intents


def build_stores(config: AppConfig) -> tuple[ReportStore, PersonStore]:
    """Create (but do not open) the two blocklist stores."""
    report_store = ReportStore(ConnectionManager(config.reports_db_path))
    person_store = PersonStore(ConnectionManager(config.persons_db_path))
    return report_store, person_store


async def open_stores(*stores: ReportStore | PersonStore) -> None:
    """Open every store. A store that fails to open is logged and left degraded."""
    for store in stores:
        if not await store.open():
            logger.critical(
                "%s is unavailable; continuing with an empty list for it.", store.label
            )


def build_pipeline(config: AppConfig, report_store: ReportStore, person_store: PersonStore) -> ModerationPipeline:
    """Wire the dispatcher and pipeline over the given stores."""
    dispatcher = CommandDispatcher(report_store, person_store, prefix=config.command_prefix)
    trigger = TriggerReply(
        word=config.trigger_word,
        image_url=config.trigger_image_url,
        filename=config.trigger_filename,
        text=config.trigger_text,
    )
    return ModerationPipeline(
        report_store,
        dispatcher,
        prefix=config.command_prefix,
        trigger=trigger,
    )


def load_cogs(discord_bot_instance: discord.Bot, pipeline: ModerationPipeline) -> None:
    """Register all operational cogs with the provided Discord bot instance.

    Parameters
    ----------
    discord_bot_instance:
        Py-Cord bot object that should receive the Grayban cogs.
    pipeline:
        Moderation pipeline injected into the message listener.
    """
    from grayban.bot.cogs import events_listener, message_listener

    events_listener.setup(discord_bot_instance)
    message_listener.setup(discord_bot_instance, pipeline)

    logger.info("All cogs loaded successfully.")


def create_bot(pipeline: ModerationPipeline) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs."""
    bot = discord.Bot(
        intents=build_intents(),
        status=PRESENCE_STATUS,
        activity=PRESENCE_ACTIVITY,
    )
    load_cogs(bot, pipeline)
    return bot


async def start_web_server(web_server: WebServer) -> bool:
    """Start the read API. A bind failure is logged and the bot runs without it."""
    try:
        await web_server.start()
    except OSError as exc:
        logger.critical("Could not start web server on %s: %s", web_server.address, exc)
        return False
    return True


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection.

    Parameters
    ----------
    bot:
        Discord client to start.
    token:
        Authentication token used to connect to Discord.
    """
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(
    bot: discord.Bot | None,
    web_server: WebServer | None,
    stores: tuple[ReportStore, PersonStore],
) -> None:
    """Stop the Discord bot, the web server and close both stores."""
    await close_bot_instance(bot, log_close=True)

    if web_server is not None:
        try:
            await web_server.stop()
        except Exception as exc:
            logger.exception("Error during web server shutdown: %s", exc)

    for store in stores:
        try:
            await store.close()
        except Exception as exc:
            logger.exception("Error while closing %s: %s", store.label, exc)

    logger.info("Shutdown complete.")


async def run_bot_session(bot: discord.Bot, token: str, control: ConsoleControl, console_enabled: bool = True) -> int:
    """Run the bot alongside the console, returning an exit code."""
    control.set_bot(bot)
    exit_code = 0

    try:
        async with console_session(control, enabled=console_enabled):
            try:
                await start_bot(bot, token)
            except discord.LoginFailure as exc:
                logger.critical("Discord rejected the bot token: %s", exc)
                exit_code = 1
            except Exception as exc:
                logger.critical("Discord bot runtime error: %s", exc)
                exit_code = 1
    finally:
        control.set_bot(None)

    return exit_code


async def async_main() -> int:
    """Bootstrap the stores, web API, bot and console, returning an exit code."""
    token = load_environment()
    port = load_port()

    stores = build_stores(app_config)
    await open_stores(*stores)

    report_store, person_store = stores
    pipeline = build_pipeline(app_config, report_store, person_store)

    web_server = WebServer(report_store, person_store, host=app_config.web_host, port=port)
    web_running = await start_web_server(web_server)

    bot: discord.Bot | None = None
    try:
        bot = create_bot(pipeline)
        control = ConsoleControl(
            report_store,
            person_store,
            web_address=web_server.address if web_running else None,
        )
        exit_code = await run_bot_session(bot, token, control, console_enabled=app_config.console_enabled)
    except Exception as exc:
        logger.critical("Failed to run Discord bot: %s", exc)
        return 1
    finally:
        await shutdown_runtime(bot, web_server if web_running else None, stores)

    if control.is_restart_requested():
        logger.info("Restart requested, returning exit code %d to trigger restart", RESTART_EXIT_CODE)
        return RESTART_EXIT_CODE

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting Grayban Discord Moderation Bot…")
    try:
        exit_code = asyncio.run(async_main())

        if exit_code == RESTART_EXIT_CODE:
            logger.info("Restart requested; replacing current process with new instance.")
            os.execv(sys.executable, [sys.executable] + sys.argv)
            return 0  # pragma: no cover

        return exit_code
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
