from .gemini import GeminiClient, ConfigurationError

__all__ = ["GeminiClient", "ConfigurationError"]
