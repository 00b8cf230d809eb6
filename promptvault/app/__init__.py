"""PromptVault REST API: FastAPI routes over an async SQLite database."""
