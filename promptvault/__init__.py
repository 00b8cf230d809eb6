"""PromptVault: prompt library API server and client core."""

__version__ = "1.0.0"
