"""Optional Redis connection (used by rate limiting)."""
