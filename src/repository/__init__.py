"""Source repository URL helpers."""
