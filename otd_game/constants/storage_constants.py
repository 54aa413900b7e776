"""Keys and defaults used by the persisted key-value store."""

GAME_STATE_KEY: str = "otd_game_state"
LAST_VISIT_DATE_KEY: str = "last_otd_game_visit_date"
GAME_START_DATE_KEY: str = "otd_game_start_date"
GAME_END_DATE_KEY: str = "otd_game_end_date"
QUESTIONS_PER_DAY_KEY: str = "otd_game_questions_per_day"
DEFAULT_STATE_FILE: str = "otd_game_state.json"
