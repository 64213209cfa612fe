from trendhaven.client.api import ApiError, TrendHavenClient
from trendhaven.client.session import AuthStateChannel

__all__ = ["ApiError", "AuthStateChannel", "TrendHavenClient"]
