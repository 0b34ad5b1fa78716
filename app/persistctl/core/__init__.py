"""Core infrastructure: paths, configuration I/O, errors, logging and theme."""
