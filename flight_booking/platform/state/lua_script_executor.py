"""
Lua Scripts for Kvrocks

Every *.lua file in the shared-kernel lua_scripts directory is registered
under its file stem via redis-py's register_script().
"""

from pathlib import Path
from typing import Any

from redis.asyncio import Redis
from redis.commands.core import AsyncScript
from redis.exceptions import NoScriptError

from flight_booking.platform.logging.loguru_io import Logger


LUA_SCRIPTS_DIR = (
    Path(__file__).parent.parent.parent
    / 'service'
    / 'shared_kernel'
    / 'driven_adapter'
    / 'lua_scripts'
)


class LuaScripts:
    """Manages Lua scripts using redis-py's register_script()"""

    def __init__(self, *, scripts_dir: Path = LUA_SCRIPTS_DIR) -> None:
        self._scripts_dir = scripts_dir
        self._sources: dict[str, str] = {}
        self._scripts: dict[str, AsyncScript] = {}
        self._initialized: bool = False

    def _load_sources(self) -> None:
        if self._sources:
            return
        for path in sorted(self._scripts_dir.glob('*.lua')):
            self._sources[path.stem] = path.read_text()
        if not self._sources:
            Logger.base.warning(f'⚠️ [LUA] No scripts found in {self._scripts_dir}')

    def initialize(self, *, client: Redis) -> None:
        """Load Lua scripts (idempotent)"""
        if self._initialized:
            return
        self._load_sources()
        for name, source in self._sources.items():
            self._scripts[name] = client.register_script(source)
        Logger.base.info(f'📜 [LUA] Registered {len(self._scripts)} scripts')
        self._initialized = True

    @property
    def names(self) -> list[str]:
        self._load_sources()
        return list(self._sources)

    async def run(self, name: str, *, client: Redis, keys: list[str], args: list[Any]) -> Any:
        """Execute a script by name with auto-retry on NoScriptError"""
        if not self._initialized:
            self.initialize(client=client)
        script = self._scripts.get(name)
        if script is None:
            raise KeyError(f'Unknown Lua script: {name}')

        try:
            return await script(keys=keys, args=args, client=client)
        except NoScriptError:
            Logger.base.warning(f'⚠️ [LUA] {name} not found, re-registering...')
            self._scripts[name] = client.register_script(self._sources[name])
            return await self._scripts[name](keys=keys, args=args, client=client)


# Global singleton
lua_scripts = LuaScripts()
