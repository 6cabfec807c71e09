"""
User-facing output for Grayban.

- **responses.py**: Every chat reply text and the help embed.

- **console.py**: Interactive operator console with status, blocklist listing
  and graceful shutdown/restart. Uses prompt_toolkit.
"""
