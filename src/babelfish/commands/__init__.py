"""Discord operator commands (!relaystatus, !usage).

- :mod:`babelfish.commands.admin` -- ``!relaystatus``, ``!usage``

Load all cogs during bot startup::

    for ext in COMMAND_EXTENSIONS:
        await bot.load_extension(ext)
"""

COMMAND_EXTENSIONS: list[str] = [
    "babelfish.commands.admin",
]
