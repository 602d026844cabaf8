"""Process-level utilities shared by entrypoints."""
