"""
Route blueprints for the task manager service.

- auth: registration and login (public)
- tasks: task CRUD and the health probe
"""
