"""Input-side safety: sanitisation, validation and the security event log."""
