"""Optional extensions built on the core."""
