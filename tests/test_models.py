"""Tests for data models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from conftest import menu_item_payload, restaurant_payload, review_payload, user_payload
from pourrice.models import (
    BilingualText,
    DietaryTag,
    MenuCategory,
    MenuItem,
    Restaurant,
    Review,
    ReviewRequest,
    UpdateUserRequest,
    User,
    UserType,
)
from pourrice.models.review import INVALID_RATING_MESSAGE, REVIEW_TOO_SHORT_MESSAGE


class TestBilingualText:
    """Tests for the BilingualText model."""

    def test_decode_canonical_shape(self):
        """Test decoding the {"EN", "TC"} object."""
        text = BilingualText.model_validate({"EN": "Hello", "TC": "你好"})

        assert text.en == "Hello"
        assert text.tc == "你好"

    def test_decode_lowercase_keys(self):
        """Test the generic string map fallback with lowercase keys."""
        text = BilingualText.model_validate({"en": "Hello", "tc": "你好"})

        assert text.en == "Hello"
        assert text.tc == "你好"

    def test_decode_partial_map_defaults_to_empty(self):
        """Test that a missing language becomes an empty string."""
        text = BilingualText.model_validate({"EN": "Hello"})

        assert text.en == "Hello"
        assert text.tc == ""

    def test_decode_empty_map(self):
        """Test that an empty object decodes to two empty strings."""
        text = BilingualText.model_validate({})

        assert text.en == ""
        assert text.tc == ""

    def test_encode_uses_wire_names(self):
        """Test that encoding produces the canonical shape."""
        text = BilingualText(en="Hello", tc="你好")

        assert text.model_dump(by_alias=True) == {"EN": "Hello", "TC": "你好"}

    def test_canonical_round_trip(self):
        """Test that the canonical shape survives encode then decode."""
        text = BilingualText(en="Noodles", tc="麵")

        assert BilingualText.model_validate_json(text.model_dump_json(by_alias=True)) == text

    @pytest.mark.parametrize(
        "language,expected",
        [("en", "Hello"), ("en-GB", "Hello"), ("zh-Hant", "你好"), ("zh-HK", "你好"), ("fr", "Hello")],
    )
    def test_localized(self, language, expected):
        """Test language selection by tag prefix."""
        text = BilingualText(en="Hello", tc="你好")

        assert text.localized(language) == expected

    def test_localized_uses_configured_language(self, global_config, monkeypatch):
        """Test that the configured preferred language is the default."""
        monkeypatch.setattr(global_config, "preferred_language", "zh-Hant")
        text = BilingualText(en="Hello", tc="你好")

        assert text.localized() == "你好"
        assert str(text) == "你好"

    def test_uniform(self):
        """Test that uniform text is the same in both languages."""
        text = BilingualText.uniform("OK")

        assert text.en == text.tc == "OK"

    def test_immutable(self):
        """Test that bilingual text is frozen."""
        text = BilingualText(en="Hello", tc="你好")

        with pytest.raises(ValidationError):
            text.en = "Bye"


class TestRestaurant:
    """Tests for the Restaurant model."""

    @pytest.fixture
    def restaurant(self):
        return Restaurant.model_validate(restaurant_payload())

    def test_decode_wire_format(self, restaurant):
        """Test decoding a backend payload."""
        assert restaurant.id == "r1"
        assert restaurant.name.en == "Golden Wok"
        assert restaurant.cuisine.tc == "粵菜"
        assert restaurant.location.latitude == pytest.approx(22.2819)
        assert restaurant.review_count == 120
        assert restaurant.email is None

    def test_rating_out_of_range_rejected(self):
        """Test that ratings outside 0-5 fail to decode."""
        with pytest.raises(ValidationError):
            Restaurant.model_validate(restaurant_payload(rating=5.5))

    def test_display_values(self, restaurant):
        """Test formatted rating and price range."""
        assert restaurant.rating_display == "4.3"
        assert restaurant.price_range_display == "$$"

    def test_open_within_hours(self, restaurant):
        """Test a Monday inside the opening window."""
        # 2025-01-06 is a Monday
        assert restaurant.is_open_now(datetime(2025, 1, 6, 12, 30))

    def test_open_at_opening_minute(self, restaurant):
        """Test that the opening time itself is inclusive."""
        assert restaurant.is_open_now(datetime(2025, 1, 6, 9, 0, 45))

    def test_closed_at_closing_minute(self, restaurant):
        """Test that the closing time is exclusive."""
        assert not restaurant.is_open_now(datetime(2025, 1, 6, 22, 0))

    def test_closed_before_opening(self, restaurant):
        """Test a Monday before opening."""
        assert not restaurant.is_open_now(datetime(2025, 1, 6, 8, 59))

    def test_closed_day(self, restaurant):
        """Test that a day flagged closed is never open."""
        # 2025-01-05 is a Sunday
        assert not restaurant.is_open_now(datetime(2025, 1, 5, 12, 0))

    def test_missing_day(self, restaurant):
        """Test that a weekday without an entry is closed."""
        assert not restaurant.is_open_now(datetime(2025, 1, 7, 12, 0))

    def test_unparseable_time_is_closed(self):
        """Test that malformed hours are treated as closed."""
        restaurant = Restaurant.model_validate(
            restaurant_payload(
                openingHours=[{"day": "Monday", "open": "9am", "close": "22:00"}]
            )
        )

        assert not restaurant.is_open_now(datetime(2025, 1, 6, 12, 0))

    def test_overnight_range_is_closed(self):
        """Test that a range ending after midnight never matches."""
        restaurant = Restaurant.model_validate(
            restaurant_payload(
                openingHours=[{"day": "Monday", "open": "18:00", "close": "02:00"}]
            )
        )

        assert not restaurant.is_open_now(datetime(2025, 1, 6, 23, 0))

    def test_distance_from(self, restaurant):
        """Test distance from the restaurant's own coordinate is zero."""
        assert restaurant.distance_from(22.2819, 114.1581) == pytest.approx(0.0)
        assert restaurant.distance_from(22.2919, 114.1581) == pytest.approx(1112, rel=0.01)


class TestMenuItem:
    """Tests for the MenuItem model."""

    def test_decode_wire_format(self):
        """Test decoding a menu item payload."""
        item = MenuItem.model_validate(
            menu_item_payload(dietaryInfo=["Gluten-Free", "Halal"], imageUrl="x.jpg")
        )

        assert item.id == "m1"
        assert item.category == MenuCategory.MAIN_COURSE
        assert item.dietary_info == [DietaryTag.GLUTEN_FREE, DietaryTag.HALAL]
        assert item.image_url == "x.jpg"

    def test_price_display(self):
        """Test HKD price formatting."""
        item = MenuItem.model_validate(menu_item_payload(price=88))

        assert item.price_display == "HK$88.00"

    def test_dietary_info_display(self):
        """Test comma-joined dietary tags."""
        item = MenuItem.model_validate(menu_item_payload(dietaryInfo=["Vegan", "Nut-Free"]))

        assert item.dietary_info_display == "Vegan, Nut-Free"

    @pytest.mark.parametrize(
        "level,expected",
        [(None, None), (0, None), (2, "🌶️🌶️"), (5, "🌶️" * 5)],
    )
    def test_spice_level_display(self, level, expected):
        """Test spice level rendering."""
        item = MenuItem.model_validate(menu_item_payload(spiceLevel=level))

        assert item.spice_level_display == expected

    @pytest.mark.parametrize("level", [-1, 6, 9])
    def test_spice_level_out_of_range(self, level):
        """Test that spice levels outside 0-5 are rejected."""
        with pytest.raises(ValidationError):
            MenuItem.model_validate(menu_item_payload(spiceLevel=level))

    def test_category_label(self):
        """Test bilingual category labels."""
        assert MenuCategory.DESSERT.localized("zh-Hant") == "甜品"
        assert MenuCategory.DESSERT.localized("en") == "Dessert"

    def test_unknown_category_rejected(self):
        """Test that an unknown category fails to decode."""
        with pytest.raises(ValidationError):
            MenuItem.model_validate(menu_item_payload(category="Brunch"))


class TestReview:
    """Tests for the Review and ReviewRequest models."""

    def test_decode_wire_format(self):
        """Test decoding a review payload with ISO-8601 dates."""
        review = Review.model_validate(review_payload(rating=4))

        assert review.id == "v1"
        assert review.rating == 4
        assert review.created_at == datetime(2025, 1, 1, 12, tzinfo=timezone.utc)
        assert review.photo_urls == []

    def test_star_rating(self):
        """Test the star string."""
        review = Review.model_validate(review_payload(rating=3))

        assert review.star_rating == "⭐⭐⭐"

    def test_relative_date(self):
        """Test human-readable age."""
        review = Review.model_validate(review_payload())
        now = datetime(2025, 1, 3, 13, 0, tzinfo=timezone.utc)

        assert review.relative_date(now) == "2 days ago"
        assert review.relative_date(review.created_at) == "just now"

    @pytest.mark.parametrize(
        "rating,comment,expected",
        [
            (0, "x" * 10, INVALID_RATING_MESSAGE),
            (6, "x" * 10, INVALID_RATING_MESSAGE),
            (1, "x" * 9, REVIEW_TOO_SHORT_MESSAGE),
            (1, "x" * 10, None),
            (5, "x" * 10, None),
            (0, "short", INVALID_RATING_MESSAGE),
        ],
    )
    def test_validation_error(self, rating, comment, expected):
        """Test validation boundaries; the rating is checked first."""
        request = ReviewRequest(restaurant_id="r1", rating=rating, comment=comment)

        assert request.validation_error() == expected
        assert request.is_valid() is (expected is None)

    def test_request_body_omits_absent_photos(self):
        """Test that an absent photo list is not serialized."""
        request = ReviewRequest(restaurant_id="r1", rating=5, comment="Great food here")

        body = request.model_dump(mode="json", by_alias=True, exclude_none=True)

        assert body == {"restaurantId": "r1", "rating": 5, "comment": "Great food here"}


class TestUser:
    """Tests for the User models."""

    def test_decode_wire_format(self):
        """Test decoding a user payload."""
        user = User.model_validate(user_payload(userType="owner"))

        assert user.id == "u1"
        assert user.display_name == "Mei"
        assert user.user_type == UserType.OWNER

    def test_with_updates(self):
        """Test that updates return a new value with a fresh timestamp."""
        user = User.model_validate(user_payload())

        updated = user.with_updates(display_name="Mei Ling")

        assert updated.display_name == "Mei Ling"
        assert updated.id == user.id
        assert updated.created_at == user.created_at
        assert updated.updated_at > user.updated_at
        assert user.display_name == "Mei"

    def test_update_request_omits_absent_fields(self):
        """Test that only provided fields are serialized."""
        request = UpdateUserRequest(display_name="Mei Ling")

        body = request.model_dump(mode="json", by_alias=True, exclude_none=True)

        assert body == {"displayName": "Mei Ling"}
