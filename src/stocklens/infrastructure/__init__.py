"""Infrastructure layer - transport implementations of the core interfaces."""
