"""
HTTP-level tests for the task manager.

Tests use the Flask test client and cover:
- Registration and login
- Task CRUD and read-after-write consistency
- Restart behaviour against the same tasks file
"""
