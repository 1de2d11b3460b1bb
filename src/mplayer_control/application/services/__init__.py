"""Application services: query coordination and the player controller."""
