"""Bearer token verification and role checks."""
