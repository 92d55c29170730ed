"""Small shared helpers (logging, environment parsing)."""
