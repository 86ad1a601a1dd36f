"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFields, SyncStatus) + field validation
- task_store.py: Firestore-backed store (collection "tasks")
- local_store.py: in-process store with optional JSON persistence
- controller.py: in-memory task list, optimistic toggle, CRUD orchestration
- countdown.py: "time remaining" formatter and the one-second recompute loop
"""
