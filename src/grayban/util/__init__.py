"""
Utility functions and helpers for Grayban.

- **logger.py**: Centralized logging configuration with colored console output,
  rotating file handlers, and per-session log aggregation. Uses prompt_toolkit
  for non-blocking console I/O.

- **discord_utils.py**: Author and permission checks, plus delete/send/reply
  helpers that log Discord API failures instead of raising.
"""
