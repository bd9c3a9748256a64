"""Quiz-related constants shared across the core and API layers."""

import math

EASY_BASE_POINTS: int = 10
MEDIUM_BASE_POINTS: int = 20
HARD_BASE_POINTS: int = 30
STREAK_BONUS_UNIT: int = 5
MAX_STREAK_BONUS_STACKS: int = 5

# Correct answers needed to master a tier. Use OPEN_ENDED_MASTERY_THRESHOLD
# for a tier that should never be auto-mastered.
OPEN_ENDED_MASTERY_THRESHOLD: float = math.inf
EASY_MASTERY_THRESHOLD: float = 5
MEDIUM_MASTERY_THRESHOLD: float = 5
HARD_MASTERY_THRESHOLD: float = 5

MAX_REPEAT_DRAW_ATTEMPTS: int = 5

# Dropdown questions never have more blanks than this.
MAX_ANSWER_BLANKS: int = 20

# Session registry limits for the quiz manager.
MAX_LIVE_SESSIONS: int = 1000
SESSION_IDLE_TIMEOUT_SECONDS: int = 30 * 60
POINTS_BAR_MAX_POINTS: int = 500

SELECT_ANSWER_PROMPT: str = "Please select an answer first!"
QUEST_COMPLETE_MESSAGE: str = "You've mastered all difficulty levels!"
QUESTIONS_EXHAUSTED_MESSAGE: str = "You've answered every question available for this path."
