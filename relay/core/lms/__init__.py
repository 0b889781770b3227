"""LMS (Canvas) integration.

Callers supply their own bearer token per request; it is never stored or logged.
"""
