"""Infrastructure helpers: logging, paths, settings and the remote board client."""
