"""
Test suite for the task manager service.

This package contains:
- unit/: repository, credential store, token, validator and guard tests
- integration/: HTTP tests through the Flask test client
- security/: token, mass-assignment and hostile-input tests
"""
