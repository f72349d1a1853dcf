"""Module __init__: thin wrappers around platform endpoints."""
#
# Each function takes the request pipeline as its first argument and returns
# the decoded response envelope untouched. Business-level codes are for the
# caller to inspect (see models.ApiResponse.raise_for_code).
#
