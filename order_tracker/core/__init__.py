"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Polling cadence, endpoint layout, wire field names
- diagnostics: Default error reporter
- exceptions: Custom exception hierarchy
"""
