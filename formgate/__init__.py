"""formgate: membership-gated form visibility decisions."""
