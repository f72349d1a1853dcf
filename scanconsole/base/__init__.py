"""Module __init__: foundational state for the console."""
#
# PURPOSE:
# Holds the building blocks everything else in the console reads from.
#
# WHAT'S IN THIS MODULE:
# - config.py: API endpoint, timeouts, storage paths, logging
# - session.py: The logged-in identity and its bearer token
# - workspace.py: Known workspaces and the current workspace selection
#
