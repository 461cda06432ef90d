"""
todo-cli: a personal task tracker for the terminal.

Subpackages:
- tasks: task entity, urgency classifier, in-memory store, JSON persistence
- cli: argument parsing, command handlers and output formatting
"""

__version__ = "0.3.0"
