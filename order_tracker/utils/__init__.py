"""Small shared helpers (identifier parsing, timestamp parsing)."""
