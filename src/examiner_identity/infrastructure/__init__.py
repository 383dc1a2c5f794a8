"""Infrastructure adapters for the credential lifecycle."""
