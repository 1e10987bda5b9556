"""Standby queue Discord bot."""
