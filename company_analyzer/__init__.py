"""Company website analyzer backend."""
