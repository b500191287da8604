"""
Domain layer for mailing header business logic.

This layer contains:
- Data models (read-only descriptors, delivery tasks)
- Business logic (basic header composition)
- Result types (explicit per-task success/failure handling)
"""
