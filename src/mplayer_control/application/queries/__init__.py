"""Answer extractions for ad hoc player queries."""
