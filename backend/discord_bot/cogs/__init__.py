"""Discord bot cogs."""
