"""
Configuration management for Grayban.

- **app_configuration.py**: YAML loader for non-secret settings (command
  prefix, trigger reply, database paths, web host, console toggle). Falls back
  to defaults on a missing or malformed file. The bot token and HTTP port come
  from the environment instead.
"""
