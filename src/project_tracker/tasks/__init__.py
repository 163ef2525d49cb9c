"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskList)
- task_errors.py: error taxonomy (StoreIOError, TaskNotFoundError, TaskValidationError)
- task_store.py: flat-file storage ("0;text" per line)
- task_service.py: the mutation/query API used by front ends
"""
