"""Unit tests that exercise modules without the HTTP layer."""
