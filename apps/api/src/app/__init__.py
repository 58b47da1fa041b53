"""InternBridge API."""
