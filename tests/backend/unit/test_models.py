"""
Unit tests for the user, content and session models.
"""
import datetime as dt

import pytest

from vgen.models import Content, User, parse_iso


def make_user(**fields) -> User:
    return User(email="ada@example.com", first_name="Ada", last_name="Lovelace", **fields)


class TestParseIso:
    def test_z_suffix(self):
        assert parse_iso("2026-01-02T03:04:05Z") == dt.datetime(2026, 1, 2, 3, 4, 5, tzinfo=dt.timezone.utc)

    def test_naive_values_are_utc(self):
        assert parse_iso("2026-01-02").tzinfo == dt.timezone.utc

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_iso("yesterday")


class TestUserQuota:
    def test_defaults(self):
        user = make_user()
        assert user.subscription.plan == "free"
        assert user.subscription.monthly_limit == 10
        assert user.can_make_request() is True

    def test_limit_reached(self):
        user = make_user(subscription={"usage_count": 10, "monthly_limit": 10})
        assert user.can_make_request() is False

    def test_record_usage(self):
        user = make_user()
        user.record_usage()
        user.record_usage()
        assert user.subscription.usage_count == 2

    def test_new_month_resets_counter(self):
        user = make_user(subscription={
            "usage_count": 10,
            "reset_date": dt.datetime(2026, 1, 31, 23, 0, tzinfo=dt.timezone.utc),
        })
        now = dt.datetime(2026, 2, 1, 0, 30, tzinfo=dt.timezone.utc)
        assert user.refresh_usage_window(now) is True
        assert user.subscription.usage_count == 0
        assert user.subscription.reset_date == now
        assert user.can_make_request() is True

    def test_same_month_keeps_counter(self):
        user = make_user(subscription={
            "usage_count": 4,
            "reset_date": dt.datetime(2026, 2, 1, tzinfo=dt.timezone.utc),
        })
        assert user.refresh_usage_window(dt.datetime(2026, 2, 27, tzinfo=dt.timezone.utc)) is False
        assert user.subscription.usage_count == 4


class TestUserSerialization:
    def test_public_view_hides_credentials(self):
        user = make_user(password_hash="secret", password_reset_token="abc")
        public = user.to_public()
        assert "passwordHash" not in public
        assert "passwordResetToken" not in public
        assert public["firstName"] == "Ada"
        assert public["subscription"]["usageCount"] == 0

    def test_row_round_trip(self):
        user = make_user(preferences={"theme": "dark", "fontSize": "large"})
        row = user.to_row()
        assert row["first_name"] == "Ada"
        assert row["preferences"]["emailNotifications"] is True
        restored = User.model_validate(row)
        assert restored.preferences.theme == "dark"
        assert restored.subscription.monthly_limit == 10

    def test_reset_token_validity(self):
        now = dt.datetime(2026, 5, 1, tzinfo=dt.timezone.utc)
        user = make_user(password_reset_token="h", password_reset_expires=now + dt.timedelta(minutes=5))
        assert user.reset_token_valid(now) is True
        assert user.reset_token_valid(now + dt.timedelta(minutes=6)) is False
        user.clear_reset_token()
        assert user.reset_token_valid(now) is False


class TestContent:
    def test_defaults(self):
        item = Content(user_id="u1", type="resume", title="Mine")
        assert item.version == 1
        assert item.is_public is False
        assert abs(item.expires_at - item.created_at - dt.timedelta(days=30)) < dt.timedelta(seconds=1)

    def test_access_rules(self):
        item = Content(user_id="u1", type="resume", title="Mine")
        assert item.is_accessible("u1") is True
        assert item.is_accessible("u2") is False
        assert item.is_accessible(None) is False
        item.is_public = True
        assert item.is_accessible("u2") is True
        assert item.is_owned_by("u2") is False

    def test_size_category(self):
        assert Content(user_id="u", type="bio", title="t", content={"bio": "x"}).size_category == "short"
        assert Content(user_id="u", type="bio", title="t", content={"bio": "x" * 1000}).size_category == "medium"
        assert Content(user_id="u", type="bio", title="t", content={"bio": "x" * 3000}).size_category == "long"

    def test_expiry(self):
        now = dt.datetime(2026, 5, 1, tzinfo=dt.timezone.utc)
        assert Content(user_id="u", type="bio", title="t", expires_at=now - dt.timedelta(seconds=1)).is_expired(now)
        assert not Content(user_id="u", type="bio", title="t", expires_at=None).is_expired(now)

    def test_touch_counts_view(self):
        item = Content(user_id="u", type="bio", title="t")
        item.touch()
        assert item.usage.views == 1

    def test_public_view_is_camel_case(self):
        public = Content(user_id="u", type="bio", title="t").to_public()
        assert {"userId", "isPublic", "isFavorite", "expiresAt", "sizeCategory", "ageDays"} <= set(public)
        assert public["ageDays"] == 0
