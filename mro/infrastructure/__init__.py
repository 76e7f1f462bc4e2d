"""Infrastructure layer: persistence and session token verification."""
