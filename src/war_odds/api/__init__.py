"""HTTP surface for the odds calculator."""
