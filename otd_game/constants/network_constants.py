"""Network configuration constants for the game server and event catalog."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
DEFAULT_LANGUAGE: str = "en"
EVENT_CATALOG_URL_TEMPLATE: str = "https://{language}.wikipedia.org/api/rest_v1/"
EVENT_CATALOG_TIMEOUT_SECONDS: float = 15.0
EVENT_CATALOG_USER_AGENT: str = "otd-game/0.1 (daily history trivia)"
