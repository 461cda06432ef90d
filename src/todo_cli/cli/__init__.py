"""
Command-line surface.

- main.py: entry point (settings -> logging -> load -> dispatch -> save)
- bootstrap.py: AppState and store load/save wiring
- commands.py: subcommand registry and handlers
- render.py: task line formatting
"""
