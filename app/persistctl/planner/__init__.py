"""Planning of persistent directories.

Canonicalizes paths, flattens the configuration into directory specs,
checks them for conflicts and sorts them into materialization order.
None of this touches the filesystem.
"""
