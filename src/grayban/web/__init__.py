"""Read-only HTTP API over the blocklists (aiohttp)."""
