"""Module __init__: local persistence for the console."""
#
# - storage.py: LocalStorage, the durable key/value store session and
#   workspace state mirror themselves into.
#
