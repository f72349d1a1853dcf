"""Module __init__: outbound HTTP."""
#
# - adapter.py: ConsoleHTTPClient, the one place requests are augmented with
#   credentials and workspace scope and responses are classified.
#
