"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, TaskSort, InvalidInput)
- task_store.py: SQLite-backed storage
- task_state.py: observable snapshot of all tasks
- task_service.py: write-then-reload orchestration over the store
- task_query.py: search -> filter -> sort pipeline for display
"""
