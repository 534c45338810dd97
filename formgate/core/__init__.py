"""Cross-cutting infrastructure: config, logging, events, exceptions, wiring."""
