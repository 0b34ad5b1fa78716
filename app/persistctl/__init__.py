"""persistctl - prepare persistent storage directories for bind mounting.

Plans and materializes the directory trees that back bind mounts from
durable storage onto an ephemeral root filesystem.
"""

__version__ = "0.1.0"
