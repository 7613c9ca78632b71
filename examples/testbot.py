"""Test bot with a few listeners. Run with: python -m tinybot run examples/testbot.py"""

import random
import re

from tinybot import Bot

bot = Bot(default_channel="#general")


@bot.hears({"type": "message", "text": "!ping"}, name="ping")
async def ping(event, captures):
    await bot.say("Pong!", event.get("channel"))


@bot.hears({"type": "message", "text": re.compile(r"^!roll (\d+)d(\d+)$")}, name="roll")
async def roll(event, captures):
    count, sides = int(captures[0]), int(captures[1])
    if count > 100 or sides > 10000:
        await bot.say("Too many dice or sides.", event.get("channel"))
        return
    rolls = [random.randint(1, sides) for _ in range(count)]
    await bot.say(f"{rolls} = {sum(rolls)}", event.get("channel"))


@bot.hears({"type": "message", "file": True}, name="file_seen")
async def file_seen(event, captures):
    await bot.say("wow, nice file.", event.get("channel"))


@bot.hears({"type": "message", "text": "!quiet"}, name="quiet")
async def quiet(event, captures):
    # everything but the quiet listener itself goes away
    bot.drop(re.compile(r"^(?!quiet$)"))
    await bot.say("Going quiet.", event.get("channel"))


def greeter(bot: Bot) -> None:
    """A trait: say hello once, the first time anyone says hi."""

    async def hello(event, captures):
        await bot.say(f"Hello <@{event['user']}>!", event.get("channel"))

    bot.hears_once({"type": "message", "text": re.compile(r"^hi\b", re.I)}, hello, name="greet")


bot.add_trait(greeter)

if __name__ == "__main__":
    bot.run()
