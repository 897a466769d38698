"""FastAPI dependencies: the service container and the session gate."""
