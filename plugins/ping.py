"""Simple ping/pong example plugin."""

from tinybot import Bot


def setup(bot: Bot):
    async def pong(event, captures):
        await bot.say("Pong!", event.get("channel"))

    bot.hears({"type": "message", "text": "ping"}, pong, name="ping")
