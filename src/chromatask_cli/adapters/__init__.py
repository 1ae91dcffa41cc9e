"""Storage, identity and settings adapters."""
