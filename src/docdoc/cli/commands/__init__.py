"""Top-level DocDoc commands (auto-discovered by the dispatcher)."""
