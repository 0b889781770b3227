"""LLM provider integration.

Kept small on purpose:
- No prompt/output logging.
- Configured via environment variables.
- Stateless: one HTTP request per completion.
"""
