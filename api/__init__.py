"""Web shell for the hexboard client."""
