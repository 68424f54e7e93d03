"""
Tests for friendship momentum and friends activity.
"""
from datetime import timedelta

import pytest

from conftest import NOW
from ten_insights.services.domain import FriendProfile, FriendshipLevel, FriendshipScore
from ten_insights.services.friends_activity import summarize_friends_activity
from ten_insights.services.friendship_momentum import (
    FriendshipMomentum,
    NoScoredFriends,
    build_momentum,
    estimate_previous_score,
    fresh_scores,
    momentum_message,
)

_SAM = FriendProfile(id="f1", username="sam", display_name="Sam")
_ALEX = FriendProfile(id="f2", username="alex")
_JO = FriendProfile(id="f3", username="jo", display_name="Jo")


class TestLevels:
    @pytest.mark.parametrize("score,level", [
        (0, FriendshipLevel.new_friend),
        (9, FriendshipLevel.new_friend),
        (10, FriendshipLevel.acquaintance),
        (30, FriendshipLevel.friend),
        (74, FriendshipLevel.friend),
        (75, FriendshipLevel.close_friend),
        (149, FriendshipLevel.close_friend),
        (150, FriendshipLevel.best_friend),
    ])
    def test_from_score(self, score, level):
        assert FriendshipLevel.from_score(score) is level

    def test_level_defaults_from_score(self):
        assert FriendshipScore(friend_id="f1", score=80).level is FriendshipLevel.close_friend

    def test_explicit_level_wins(self):
        score = FriendshipScore(friend_id="f1", score=80, level=FriendshipLevel.friend)
        assert score.level is FriendshipLevel.friend

    def test_next_level_score(self):
        assert FriendshipLevel.friend.next_level_score == 75
        assert FriendshipLevel.best_friend.next_level_score is None


class TestBuildMomentum:
    def test_no_friends_omits_insight(self):
        assert build_momentum([], {}) is None

    def test_friends_without_scores_is_distinct_empty_state(self):
        result = build_momentum([_SAM, _ALEX], {})
        assert isinstance(result, NoScoredFriends)
        assert result.friend_count == 2
        assert result.message.startswith("Start interacting")

    def test_scores_for_strangers_are_ignored(self):
        result = build_momentum([_SAM], {"zz": FriendshipScore(friend_id="zz", score=200)})
        assert isinstance(result, NoScoredFriends)

    def test_picks_top_score(self):
        scores = {
            "f1": FriendshipScore(friend_id="f1", score=40, total_interactions=20, friendship_weeks=4),
            "f2": FriendshipScore(friend_id="f2", score=120, total_interactions=60, friendship_weeks=6),
        }
        result = build_momentum([_SAM, _ALEX], scores)
        assert isinstance(result, FriendshipMomentum)
        assert result.friend.id == "f2"
        assert result.level is FriendshipLevel.close_friend
        assert result.previous_score == 110
        assert result.message == "30 more points to best friend status with alex"

    def test_tie_goes_to_first_friend(self):
        scores = {
            "f1": FriendshipScore(friend_id="f1", score=50),
            "f3": FriendshipScore(friend_id="f3", score=50),
        }
        assert build_momentum([_SAM, _JO], scores).friend.id == "f1"
        assert build_momentum([_JO, _SAM], scores).friend.id == "f3"


class TestPreviousScore:
    def test_zero_weeks_is_tolerated(self):
        score = FriendshipScore(friend_id="f1", score=40, total_interactions=12, friendship_weeks=0)
        assert estimate_previous_score(score) == 28

    def test_never_negative(self):
        score = FriendshipScore(friend_id="f1", score=5, total_interactions=90, friendship_weeks=1)
        assert estimate_previous_score(score) == 0


class TestMessages:
    def test_best_friend(self):
        score = FriendshipScore(friend_id="f1", score=180, total_interactions=95)
        assert momentum_message("Sam", score) == "Sam is your #1 with 95 interactions!"

    def test_close_friend_counts_to_next_level(self):
        score = FriendshipScore(friend_id="f1", score=80)
        assert momentum_message("Sam", score) == "70 more points to best friend status with Sam"

    @pytest.mark.parametrize("value,expected", [
        (40, "Your bond with Sam is growing strong"),
        (15, "Keep engaging with Sam to level up"),
        (2, "Start your journey with Sam"),
    ])
    def test_lower_tiers(self, value, expected):
        assert momentum_message("Sam", FriendshipScore(friend_id="f1", score=value)) == expected


class TestFreshScores:
    def test_stale_scores_are_dropped(self):
        scores = {
            "f1": FriendshipScore(friend_id="f1", score=50, last_updated=NOW - timedelta(minutes=30)),
            "f2": FriendshipScore(friend_id="f2", score=90, last_updated=NOW - timedelta(hours=3)),
            "f3": FriendshipScore(friend_id="f3", score=10),
        }
        fresh = fresh_scores(scores, NOW, timedelta(hours=1))
        assert set(fresh) == {"f1", "f3"}


class TestFriendsActivity:
    def test_no_friends(self):
        assert summarize_friends_activity([]) is None

    def test_nobody_rated(self):
        result = summarize_friends_activity([_SAM, _ALEX])
        assert result.rated_count == 0
        assert result.average_rating is None
        assert result.highlight is None
        assert result.message == "Be the first to spark today's vibes"

    def test_struggling_friend_is_highlighted_first(self):
        friends = [
            FriendProfile(id="f1", username="sam", today_rating=9),
            FriendProfile(id="f2", username="alex", today_rating=3),
            FriendProfile(id="f3", username="jo"),
        ]
        result = summarize_friends_activity(friends)
        assert result.rated_count == 2
        assert result.total_friends == 3
        assert not result.all_rated
        assert result.average_rating == pytest.approx(6.0)
        assert result.highlight.id == "f2"
        assert result.message == "Maybe check in with alex"

    def test_great_day_highlight(self):
        friends = [
            FriendProfile(id="f1", username="sam", today_rating=6),
            FriendProfile(id="f2", username="alex", today_rating=8),
        ]
        result = summarize_friends_activity(friends)
        assert result.all_rated
        assert result.highlight.id == "f2"
        assert result.message == "alex is having a great day"
