"""Core plumbing: errors, logging, load pipeline and controller state."""
