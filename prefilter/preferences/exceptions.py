class PreferenceStoreError(Exception):
    """Raised when a preference cannot be read from or written to its store."""
