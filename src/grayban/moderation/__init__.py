"""
Moderation logic for Grayban.

- **command_parser.py**: Splits a message into a command and its arguments.
- **pattern_scanner.py**: Extracts bracketed numeric ids from message text.
- **command_dispatcher.py**: Runs blocklist commands and builds replies.
- **moderation_pipeline.py**: Per-message flow from trigger check through
  enforcement to command dispatch.
"""
