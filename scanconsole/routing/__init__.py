"""Module __init__: console views and navigation."""
#
# - guard.py: route table, guard() decision function, role-filtered menu
# - navigator.py: current view, guarded push(), forced push to /login
#
