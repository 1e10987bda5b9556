from discord_bot.bot import run

run()
