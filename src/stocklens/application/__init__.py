"""Application layer - use cases wiring core services to transports."""
