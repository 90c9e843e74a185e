"""
Todoist TUI - terminal client for today's and overdue tasks.

Architecture:
- providers.py: domain snapshots + collaborator protocols
- classify.py / matching.py / form.py: pure building blocks
- controller.py: view-state machine, the only owner of UI state
- runner.py: executes controller commands off the UI thread
- client.py / cache.py: remote service and local snapshot store
- views/: Textual screen + rich renderers
- app.py: Textual application wiring everything together
"""

__version__ = "0.1.0"
