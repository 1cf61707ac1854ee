"""Security-focused tests at the HTTP boundary."""
