"""Static metadata describing Spellbook Savings."""

APP_NAME = "Spellbook Savings"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "Spellbook Savings is a personal-finance quiz. Pick a financial path, answer "
    "questions to earn points and streaks, and climb from easy to hard until every "
    "difficulty level is mastered."
)
