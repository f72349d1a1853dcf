"""Module __init__: shared helpers."""
#
# - observer.py: Signal, the pub/sub hook state objects emit through
#
