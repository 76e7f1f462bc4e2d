"""Session authentication."""

from mro.infrastructure.auth.session_tokens import decode_session_token, issue_token

__all__ = ["decode_session_token", "issue_token"]
