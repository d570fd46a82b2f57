"""Health checks — run a battery of commands and decide pass/fail."""
