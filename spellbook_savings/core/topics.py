"""Player-facing topics and the question categories each one covers."""

from __future__ import annotations

from enum import Enum
import random

from spellbook_savings.core.models import Category


class GameTopic(str, Enum):
    INCOME = "Income"
    BUDGETING = "Budgeting"
    SAVING = "Saving"
    INVESTING = "Investing"
    DEBT_MANAGEMENT = "Debt Management"
    RISK_MANAGEMENT = "Risk Management"


TOPIC_CATEGORIES: dict[GameTopic, tuple[Category, ...]] = {
    GameTopic.INCOME: (Category.INCOME, Category.BANKING, Category.TAXES),
    GameTopic.BUDGETING: (Category.BUDGETING,),
    GameTopic.SAVING: (Category.SAVING,),
    GameTopic.INVESTING: (Category.INVESTING,),
    GameTopic.DEBT_MANAGEMENT: (Category.DEBT_MANAGEMENT, Category.DEBT, Category.CREDIT),
    GameTopic.RISK_MANAGEMENT: (Category.RISK_MANAGEMENT, Category.INSURANCE, Category.FRAUD),
}


def categories_for_topic(topic: GameTopic) -> tuple[Category, ...]:
    """Return the ordered, non-empty set of categories eligible for ``topic``."""
    return TOPIC_CATEGORIES[topic]


def random_allowed_category(topic: GameTopic, rng: random.Random | None = None) -> Category:
    """Pick one of the topic's categories uniformly at random."""
    chooser = rng or random
    return chooser.choice(categories_for_topic(topic))


def format_game_topic(topic: GameTopic) -> str:
    return topic.value
