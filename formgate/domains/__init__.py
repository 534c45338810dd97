"""Domain packages: group expansion and access decisions."""
