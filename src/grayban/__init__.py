"""
Grayban - blocklist moderation bot for Discord

Grayban keeps two independent blocklists of external (Roblox) ids and
moderates chat against them:

- **Report blocklist**: ids flagged by community reports. Any message that
  mentions one as ``[123456]`` is deleted and its author is notified.
- **Person blocklist**: ids banned by an administrator with a severity level
  (1 = standard, 2 = extended). Managed only through commands.
- **Chat commands**: ``!ban-report``, ``!unban-report``, ``!check-report``,
  ``!list-report``, ``!ban``, ``!unban``, ``!check``, ``!list``, ``!help``.
- **Read API**: ``GET /bannedIDs`` and ``GET /bannedPersons`` serve the
  current lists as JSON.
- **Interactive Console**: operator console for status checks and graceful
  restart/shutdown.

Usage:
    from grayban.main import main
    main()  # Starts the bot, web API and console
"""
