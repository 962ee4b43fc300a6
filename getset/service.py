import asyncio
import logging
from typing import Dict, Mapping, NoReturn

from getset.errors import CommandError, StorePersistError
from getset.interfaces import CommandServiceInterface, ConfigStoreInterface
from getset.models import CommandResult, StatEntry
from getset.parser import parse_command

logger = logging.getLogger("SERVICE")


class CommandService(CommandServiceInterface):
    """
    Executes "$get <key>" and "$set <key>=<value>" commands against the
    config store and keeps per-key read/write counters in memory.

    The store and the counters are guarded by one lock, so a response always
    carries the value together with the counters of the same request.
    """

    def __init__(self, store: ConfigStoreInterface):
        self.store = store
        self.lock = asyncio.Lock()
        self.stats: Dict[str, StatEntry] = {}

    def initialize(self):
        self.store.load()
        return self

    async def shutdown(self):
        # Wait for an in-flight SET to finish writing the backing file
        async with self.lock:
            await self.store.shutdown()

    def _stat(self, key: str) -> StatEntry:
        # call under self.lock
        stat = self.stats.get(key)
        if stat is None:
            stat = self.stats[key] = StatEntry()
        return stat

    def handle_get(self) -> NoReturn:
        raise CommandError("Use POST method")

    async def handle_post(self, params: Mapping[str, str]) -> CommandResult:
        if "command" not in params:
            raise CommandError("No command POSTed")
        return await self.dispatch(params["command"])

    async def dispatch(self, command: str) -> CommandResult:
        cmd = parse_command(command)
        if cmd.verb == "get":
            return await self.get(cmd.key)
        return await self.set(cmd.key, cmd.value)

    async def get(self, key: str) -> CommandResult:
        async with self.lock:
            value = self.store.get(key) or ""
            stat = self._stat(key)
            stat.reads += 1
            return CommandResult(
                verb="get", key=key, value=value, reads=stat.reads, writes=stat.writes
            )

    async def set(self, key: str, value: str) -> CommandResult:
        async with self.lock:
            previous = self.store.get(key)
            self.store.set(key, value)
            try:
                await self.store.save()
            except StorePersistError:
                # keep memory in line with what is on disk
                if previous is None:
                    self.store.delete(key)
                else:
                    self.store.set(key, previous)
                logger.error(f"SET {key} not applied, backing file write failed")
                raise
            stat = self._stat(key)
            stat.writes += 1
            logger.debug(f"SET {key} writes={stat.writes}")
            return CommandResult(
                verb="set", key=key, value=value, reads=stat.reads, writes=stat.writes
            )
