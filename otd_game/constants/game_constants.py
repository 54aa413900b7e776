"""Game-related constants shared across the core and server layers."""

MAX_QUESTIONS: int = 10
DEFAULT_QUESTIONS_PER_DAY: int = 5
PAGES_PER_ANSWER: int = 2
