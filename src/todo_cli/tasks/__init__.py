"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority) and due-date parsing
- urgency.py: pure due-date classification used by listings
- task_store.py: in-memory ordered collection with id allocation
- storage.py: whole-file JSON load/save of a TaskStore
"""
