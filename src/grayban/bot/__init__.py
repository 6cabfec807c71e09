"""
Discord cogs and event handlers for Grayban.

- **events_listener.py**: Handles bot lifecycle (on_ready) and presence.

- **message_listener.py**: Routes every new message through the moderation
  pipeline (trigger reply, blocked-id enforcement, chat commands).
"""
