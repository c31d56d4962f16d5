"""Parameter validation for tool inputs."""
