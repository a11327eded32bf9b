"""Battle simulation: stat blocks, damage, turns, difficulty and orchestration."""
