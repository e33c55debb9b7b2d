"""Core primitives: enumerations, PEM codec and cancellation."""
