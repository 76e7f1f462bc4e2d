"""HTTP API for the MRO service."""
