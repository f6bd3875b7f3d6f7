"""
Unit tests for services.flashcards module.
Tests SM-2 scheduling, study plans, recommendations and study statistics.
"""
import math
import datetime as dt

import pytest

from vgen.models import Content
from vgen.services import flashcards


NOW = dt.datetime(2026, 3, 10, 12, 0, tzinfo=dt.timezone.utc)


def card(**fields) -> dict:
    return {"question": "Q", "answer": "A", **fields}


class TestCardHelpers:
    def test_new_card_id_format(self):
        prefix, millis, suffix = flashcards.new_card_id().split("_")
        assert prefix == "fc"
        assert millis.isdigit()
        assert len(suffix) == 9

    def test_extract_tags_skips_short_and_common_words(self):
        tags = flashcards.extract_tags("What would the mitochondria produce? The mitochondria produce energy")
        assert tags == ["what", "mitochondria", "produce", "energy"]

    def test_extract_tags_caps_at_five(self):
        assert len(flashcards.extract_tags("alpha bravo charlie delta echoes foxtrot golfs")) == 5

    def test_enrich_card_defaults(self):
        enriched = flashcards.enrich_card(card(question="Define osmosis", answer="Water diffusion"), "hard", NOW)
        assert enriched["nextReview"] == "2026-03-10T12:00:00Z"
        assert enriched["interval"] == 1
        assert enriched["easeFactor"] == 2.5
        assert enriched["repetitions"] == 0
        assert enriched["difficulty"] == "hard"
        assert enriched["performance"] == "new"
        assert enriched["lastReviewed"] is None

    def test_enrich_card_keeps_model_difficulty(self):
        assert flashcards.enrich_card(card(difficulty="easy"), "hard", NOW)["difficulty"] == "easy"

    def test_study_time(self):
        assert flashcards.study_time(7) == "14 minutes"


class TestScheduleReview:
    def test_first_good_review(self):
        result = flashcards.schedule_review("fc_1", "good", now=NOW)
        assert result["interval"] == 1
        assert result["repetitions"] == 1
        assert result["easeFactor"] == pytest.approx(2.5)
        assert result["nextReview"] == "2026-03-11T12:00:00Z"

    def test_second_good_review(self):
        result = flashcards.schedule_review("fc_1", "good", interval=1, repetitions=1, now=NOW)
        assert result["interval"] == 6
        assert result["repetitions"] == 2

    def test_later_good_review_multiplies_interval(self):
        result = flashcards.schedule_review("fc_1", "good", interval=6, ease_factor=2.5, repetitions=2, now=NOW)
        assert result["interval"] == 15

    def test_easy_uses_updated_ease_factor(self):
        result = flashcards.schedule_review("fc_1", "easy", interval=6, ease_factor=2.5, repetitions=2, now=NOW)
        assert result["easeFactor"] == pytest.approx(2.6)
        assert result["interval"] == math.ceil(6 * 2.6)
        assert result["repetitions"] == 3

    def test_hard_grows_interval_slowly(self):
        result = flashcards.schedule_review("fc_1", "hard", interval=10, ease_factor=2.5, repetitions=3, now=NOW)
        assert result["interval"] == 12
        assert result["repetitions"] == 3
        assert result["easeFactor"] == pytest.approx(2.36)

    def test_again_resets(self):
        result = flashcards.schedule_review("fc_1", "again", interval=30, ease_factor=2.5, repetitions=5, now=NOW)
        assert result["interval"] == 1
        assert result["repetitions"] == 0
        assert result["easeFactor"] == pytest.approx(1.7)

    def test_ease_factor_floor(self):
        assert flashcards.updated_ease_factor(1.3, "again") == flashcards.MIN_EASE_FACTOR

    def test_unknown_rating(self):
        with pytest.raises(ValueError):
            flashcards.schedule_review("fc_1", "perfect")


class TestStudyPlan:
    def test_even_split(self):
        plan = flashcards.study_plan([f"c{i}" for i in range(14)], study_days=7, daily_cards=20, now=NOW)
        assert plan["cardsPerDay"] == 2
        assert all(day["cardCount"] == 2 for day in plan["schedule"])
        assert plan["schedule"][0]["date"] == "2026-03-11T12:00:00Z"
        assert plan["schedule"][0]["estimatedTime"] == "4 minutes"

    def test_daily_cap_leaves_cards_unscheduled(self):
        plan = flashcards.study_plan([f"c{i}" for i in range(30)], study_days=2, daily_cards=5, now=NOW)
        assert plan["cardsPerDay"] == 5
        assert sum(day["cardCount"] for day in plan["schedule"]) == 10

    def test_more_days_than_cards(self):
        plan = flashcards.study_plan(["a", "b"], study_days=4, now=NOW)
        assert [day["cardCount"] for day in plan["schedule"]] == [1, 1, 0, 0]


class TestRecommendations:
    def test_hard_cards_add_focus_area(self):
        due = (NOW - dt.timedelta(hours=1)).isoformat()
        cards = [card(nextReview=due, performance="hard") for _ in range(3)] + [card(nextReview=due)]
        recs = flashcards.study_recommendations(cards, NOW)
        assert recs["cardsToStudy"] == 4
        assert recs["recommendedSessionTime"] == 8
        assert recs["focusAreas"] == ["Focus on difficult concepts"]

    def test_session_time_capped(self):
        due = (NOW - dt.timedelta(hours=1)).isoformat()
        recs = flashcards.study_recommendations([card(nextReview=due) for _ in range(25)], NOW)
        assert recs["recommendedSessionTime"] == 30
        assert recs["suggestedBreaks"] is True
        assert len(recs["priorityCards"]) == 10

    def test_unparseable_dates_are_not_due(self):
        recs = flashcards.study_recommendations([card(nextReview="tomorrow-ish")], NOW)
        assert recs["cardsToStudy"] == 0

    def test_weekly_goal_reminder(self):
        reminders = flashcards.study_reminders([card(), card()], NOW)
        assert [r["type"] for r in reminders] == ["weekly_goal"]

    def test_assess_difficulty(self):
        easy = flashcards.assess_difficulty([card(difficulty="easy")] * 4)
        assert easy["overallDifficulty"] == "easy"
        assert easy["averageLength"] == {"question": 1, "answer": 1}
        assert flashcards.assess_difficulty([])["overallDifficulty"] == "medium"

    def test_assess_difficulty_tolerates_null_fields(self):
        result = flashcards.assess_difficulty([
            {"question": None, "answer": 42, "difficulty": None},
            {"question": "Why?", "answer": "Because", "difficulty": ["hard"]},
        ])
        assert result["distribution"]["medium"] == 2
        assert result["averageLength"] == {"question": 2, "answer": 4}


class TestStudyStats:
    def test_aggregates_saved_sets(self):
        reviewed = (NOW - dt.timedelta(days=3)).isoformat()
        sets = [
            Content(user_id="u1", type="flashcard", title="A", content={"flashcards": [
                card(totalReviews=6, correctReviews=3, streak=4, performance="hard", lastReviewed=reviewed),
                card(nextReview=(NOW - dt.timedelta(days=1)).isoformat()),
            ]}),
            Content(user_id="u1", type="flashcard", title="B", content={"flashcards": ["not a card"]}),
        ]
        stats = flashcards.study_stats(sets, NOW)
        assert stats["totalSets"] == 2
        assert stats["totalCards"] == 2
        assert stats["cardsStudied"] == 1
        assert stats["averageAccuracy"] == 50
        assert stats["studyStreak"] == 4
        assert stats["totalStudyTime"] == 12
        assert stats["cardsDue"] == 1
        assert stats["performance"]["hard"] == 1
        assert stats["currentProgress"] == {"daily": 0, "weekly": 1, "monthly": 1}
        assert [a["cardCount"] for a in stats["recentActivity"]] == [2, 1]

    def test_empty(self):
        stats = flashcards.study_stats([], NOW)
        assert stats["averageAccuracy"] == 0
        assert stats["studyStreak"] == 0

    def test_malformed_saved_values_are_ignored(self):
        sets = [
            Content(user_id="u1", type="flashcard", title="A", content={"flashcards": [
                card(totalReviews="lots", correctReviews=None, streak=[3], performance=["good"]),
                card(totalReviews="4", correctReviews=2, streak=-2, nextReview=12345),
            ]}),
            Content(user_id="u1", type="flashcard", title="B", content={"flashcards": 7}),
        ]
        stats = flashcards.study_stats(sets, NOW)
        assert stats["totalCards"] == 2
        assert stats["cardsStudied"] == 1
        assert stats["averageAccuracy"] == 50
        assert stats["studyStreak"] == 0
        assert stats["cardsDue"] == 0
        assert stats["performance"] == {"easy": 0, "good": 0, "hard": 0, "again": 0}
        assert [a["cardCount"] for a in stats["recentActivity"]] == [2, 0]
