"""Review service: fetching, submission and rating statistics."""

import logging

from pourrice.errors import InvalidReview
from pourrice.models.review import (
    MAX_RATING,
    MIN_RATING,
    Review,
    ReviewListResponse,
    ReviewRequest,
)
from pourrice.network.client import APIClient
from pourrice.network.endpoints import FetchReviews, SubmitReview

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for restaurant reviews."""

    def __init__(self, api_client: APIClient) -> None:
        self.api_client = api_client

    async def fetch_reviews(
        self, restaurant_id: str, limit: int | None = None
    ) -> list[Review]:
        """Fetch reviews for a restaurant.

        Args:
            restaurant_id: Restaurant identifier
            limit: Maximum number of reviews (server default if omitted)

        Returns:
            List of reviews
        """
        logger.info(f"Fetching reviews for restaurant: {restaurant_id}")

        endpoint = FetchReviews(restaurant_id=restaurant_id, limit=limit)
        response = await self.api_client.request(endpoint, ReviewListResponse)

        logger.info(f"Fetched {len(response.reviews)} reviews")
        return response.reviews

    async def submit_review(self, request: ReviewRequest) -> Review:
        """Validate and submit a review.

        Validation happens locally; an invalid review never reaches the
        network.

        Args:
            request: Review payload

        Returns:
            The stored review with its server-assigned id

        Raises:
            InvalidReview: If the rating or comment is invalid
            APIError: If the request fails
        """
        reason = request.validation_error()
        if reason is not None:
            logger.warning(f"Review validation failed: {reason.en}")
            raise InvalidReview(reason)

        logger.info(
            f"Submitting review for restaurant: {request.restaurant_id} "
            f"(rating {request.rating}/5, {len(request.comment)} characters)"
        )

        review = await self.api_client.request(SubmitReview(request=request), Review)

        logger.info(f"Review submitted successfully with ID: {review.id}")
        return review

    @staticmethod
    def calculate_average_rating(reviews: list[Review]) -> float:
        """Mean rating, or 0.0 for no reviews."""
        if not reviews:
            return 0.0
        return sum(review.rating for review in reviews) / len(reviews)

    @staticmethod
    def count_reviews_by_rating(reviews: list[Review]) -> dict[int, int]:
        """Histogram of ratings 1-5; out-of-range ratings are ignored."""
        counts = {rating: 0 for rating in range(MIN_RATING, MAX_RATING + 1)}
        for review in reviews:
            if review.is_valid_rating:
                counts[review.rating] += 1
        return counts
