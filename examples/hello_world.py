"""
settings_provider — Hello World

A tiny bot with one guild, one command and one group.  Settings live in
a SQLite file, so running the script twice shows them being re-applied
on startup.

Usage:
    python examples/hello_world.py
"""

import asyncio
import logging
from collections import defaultdict

from settings_provider import ProviderConfig, StoreConfig, create_provider
from settings_provider.host import COMMAND_PREFIX_CHANGE, COMMAND_STATUS_CHANGE

# ─── A toy host (your bot framework provides the real one) ───


class Guild:
    def __init__(self, id):
        self.id = id
        self.command_prefix = None


class Toggle:
    def __init__(self, name):
        self.name = self.id = name
        self.disabled_in = set()

    def set_enabled_in(self, guild, enabled):
        where = guild.id if guild else "everywhere"
        (self.disabled_in.discard if enabled else self.disabled_in.add)(where)


class Registry:
    def __init__(self, commands, groups):
        self.commands = {c.name: c for c in commands}
        self.groups = {g.id: g for g in groups}


class Bot:
    def __init__(self):
        self.guilds = {"1001": Guild("1001")}
        self.registry = Registry([Toggle("ping")], [Toggle("fun")])
        self.command_prefix = "!"
        self.shard = None
        self._listeners = defaultdict(list)

    def on(self, event, listener):
        self._listeners[event].append(listener)

    def remove_listener(self, event, listener):
        self._listeners[event].remove(listener)

    async def emit(self, event, *args):
        for listener in self._listeners[event]:
            result = listener(*args)
            if asyncio.iscoroutine(result):
                await result


async def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s %(message)s")

    bot = Bot()
    guild = bot.guilds["1001"]
    ping = bot.registry.commands["ping"]

    # ──────────────────────────────────────
    #  1. Build the provider and attach it
    # ──────────────────────────────────────
    config = ProviderConfig(store=StoreConfig(type="sqlite", path="hello_settings.db"))
    provider = create_provider(config)
    await provider.init(bot)

    print(f"global prefix after load: {bot.command_prefix!r}")
    print(f"guild prefix after load:  {guild.command_prefix!r}")
    print(f"ping disabled in:         {sorted(ping.disabled_in)}")

    # ──────────────────────────────────────
    #  2. The bot emits events, the provider persists them
    # ──────────────────────────────────────
    await bot.emit(COMMAND_PREFIX_CHANGE, guild, "?")
    await bot.emit(COMMAND_STATUS_CHANGE, guild, ping, False)

    # ──────────────────────────────────────
    #  3. Direct access
    # ──────────────────────────────────────
    await provider.set(None, "prefix", "$")
    await provider.set(guild, "welcome_channel", "general")
    print(f"welcome channel: {provider.get(guild, 'welcome_channel')}")
    print(f"removed:         {await provider.remove(guild, 'welcome_channel')}")
    print(f"missing:         {provider.get(guild, 'welcome_channel', 'none')}")

    provider.destroy()
    await provider.store.close()
    print("\nRun again to see the saved settings re-applied.")


if __name__ == "__main__":
    asyncio.run(main())
