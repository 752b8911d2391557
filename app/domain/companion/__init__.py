"""Companion domain: session credentials, the session guard and listening parties."""
