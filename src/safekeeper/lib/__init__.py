"""Library layer shared by the safekeeper CLI."""
