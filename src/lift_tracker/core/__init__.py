"""Domain model, set tracking, timers and statistics."""
