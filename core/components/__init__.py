"""Stage-tagged component store."""
