"""Domain layer for tally: money arithmetic, CSV import and account services."""
