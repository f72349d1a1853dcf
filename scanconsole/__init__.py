# ============================================================================
# scanconsole/__init__.py
# Package Marker for the Scan Console Client
# ============================================================================
#
# PURPOSE:
# Headless client for the scanning platform's admin API. Every request the
# console makes is authenticated, scoped to the active workspace, and reacts
# to expired logins in one place (scanconsole.net.adapter).
#
# LAYOUT:
# - base/     Session and workspace state, configuration
# - data/     Durable local key/value storage
# - net/      The request pipeline wrapping httpx
# - routing/  Route table, navigation guard, navigator
# - api/      Thin endpoint wrappers
# - cli/      Command-line front end
#
# ============================================================================

__version__ = "0.3.0"
