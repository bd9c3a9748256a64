from __future__ import annotations

import random

import pytest

from spellbook_savings.core.display import format_category, format_difficulty, format_question_type
from spellbook_savings.core.models import Category, Difficulty, QuestionType
from spellbook_savings.core.topics import (
    GameTopic,
    categories_for_topic,
    format_game_topic,
    random_allowed_category,
)


@pytest.mark.parametrize("topic", list(GameTopic))
def test_every_topic_has_categories(topic):
    categories = categories_for_topic(topic)
    assert categories
    assert all(isinstance(category, Category) for category in categories)


def test_topic_mapping_matches_financial_paths():
    assert categories_for_topic(GameTopic.INCOME) == (Category.INCOME, Category.BANKING, Category.TAXES)
    assert Category.FRAUD in categories_for_topic(GameTopic.RISK_MANAGEMENT)
    assert Category.CREDIT in categories_for_topic(GameTopic.DEBT_MANAGEMENT)


def test_random_allowed_category_stays_within_topic():
    rng = random.Random(7)
    picks = {random_allowed_category(GameTopic.INCOME, rng) for _ in range(200)}
    assert picks == set(categories_for_topic(GameTopic.INCOME))


def test_labels():
    assert format_game_topic(GameTopic.DEBT_MANAGEMENT) == "Debt Management"
    assert format_difficulty(Difficulty.MEDIUM) == "Medium"
    assert format_category(Category.RISK_MANAGEMENT) == "Risk Management"
    assert format_category(Category.TAXES) == "Taxes"
    assert format_question_type(QuestionType.FILL_IN_THE_BLANK) == "Fill in the Blank"
