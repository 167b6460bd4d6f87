"""Command-line interface for browsing Pour Rice restaurants."""

import asyncio
import inspect
import logging
import shlex
import sys

from pourrice.config import get_config, setup_logging
from pourrice.container import Services
from pourrice.errors import PourRiceError
from pourrice.main_context import MainContext
from pourrice.models.menu import MenuItem
from pourrice.models.restaurant import Restaurant
from pourrice.models.review import Review, ReviewRequest

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  nearby <lat> <lng> [radius]        Restaurants around a coordinate
  featured                           Featured restaurants
  restaurant <id>                    Restaurant details
  menu <id>                          Menu of a restaurant
  reviews <id>                       Reviews of a restaurant
  review <id> <rating> <comment...>  Post a review (sign in first)
  search <query>                     Full-text search
  signin <email> <password>          Sign in
  signout                            Sign out
  help                               Show this help
  quit                               Exit"""


def format_restaurant(restaurant: Restaurant) -> str:
    status = "Open now" if restaurant.is_open_now() else "Closed"
    return (
        f"[{restaurant.id}] {restaurant.name} - {restaurant.cuisine}, "
        f"{restaurant.district} | {restaurant.price_range_display} | "
        f"★ {restaurant.rating_display} ({restaurant.review_count}) | {status}"
    )


def format_menu_item(item: MenuItem) -> str:
    line = f"  {item.name} {item.price_display}"
    if item.spice_level_display:
        line += f" {item.spice_level_display}"
    if item.dietary_info:
        line += f" ({item.dietary_info_display})"
    if not item.is_available:
        line += " [unavailable]"
    return line


def format_review(review: Review) -> str:
    return (
        f"  {review.star_rating} {review.user_name}, {review.relative_date()}\n"
        f"    {review.comment}"
    )


class PourRiceCLI:
    """Interactive command loop over the client services."""

    def __init__(self) -> None:
        """Initialize the CLI."""
        self.config = get_config()
        setup_logging(self.config)
        self.services: Services | None = None

        logger.info("Pour Rice CLI initialized")
        self._display_config_status()

    def _display_config_status(self) -> None:
        print("\n" + "=" * 60)
        print("POUR RICE - Restaurant Discovery")
        print("\n" + "=" * 60)
        print(f"API: {self.config.api_base_url}")
        print(f"Sign-in: {'enabled' if self.config.has_firebase_config() else 'disabled'}")
        print(f"Search: {'enabled' if self.config.has_algolia_config() else 'disabled'}")
        print("\n" + "=" * 60 + "\n")

    async def run(self) -> None:
        """Run the CLI until the user quits."""
        main_context = MainContext(asyncio.get_running_loop())
        self.services = Services.create(self.config, main_context=main_context)

        print(HELP_TEXT)
        try:
            while True:
                try:
                    line = (await asyncio.to_thread(input, "\npourrice> ")).strip()
                except (EOFError, KeyboardInterrupt):
                    print("\nGoodbye!")
                    break

                if not line:
                    continue
                if line.lower() in ["quit", "exit", "q"]:
                    print("\nGoodbye!")
                    break

                try:
                    await self._dispatch(line)
                except PourRiceError as e:
                    e.log(line)
                    print(f"\n⚠ {e.localized_message()}")
                    if e.recovery_suggestion is not None:
                        print(f"  {e.recovery_suggestion}")
                except Exception as e:
                    logger.error(f"Unexpected error: {e}", exc_info=True)
                    print(f"\n⚠ An unexpected error occurred: {e}")
        finally:
            await self.services.aclose()

    async def _dispatch(self, line: str) -> None:
        try:
            command, *args = shlex.split(line)
        except ValueError as e:
            print(f"Could not parse command: {e}")
            return

        handler = getattr(self, f"_cmd_{command.lower()}", None)
        if handler is None:
            print(f"Unknown command: {command}. Type 'help' for a list.")
            return

        try:
            inspect.signature(handler).bind(*args)
        except TypeError:
            print(f"Invalid arguments for '{command}'. Type 'help' for usage.")
            return

        try:
            await handler(*args)
        except ValueError as e:
            logger.debug(f"Bad arguments for {command}: {e}")
            print(f"Invalid value for '{command}': {e}")

    # ==================== COMMANDS ====================

    async def _cmd_help(self) -> None:
        print(HELP_TEXT)

    async def _cmd_nearby(self, lat: str, lng: str, radius: str | None = None) -> None:
        restaurants = await self.services.restaurants.fetch_nearby_restaurants(
            float(lat), float(lng), float(radius) if radius else None
        )
        self._print_restaurants(restaurants)

    async def _cmd_featured(self) -> None:
        restaurants = await self.services.restaurants.fetch_featured_restaurants()
        self._print_restaurants(restaurants)

    async def _cmd_restaurant(self, restaurant_id: str) -> None:
        restaurant = await self.services.restaurants.fetch_restaurant(restaurant_id)
        print(format_restaurant(restaurant))
        print(f"  {restaurant.description}")
        print(f"  {restaurant.address}")
        print(f"  Tel: {restaurant.phone_number}")
        for hours in restaurant.opening_hours:
            print(f"  {hours.day}: {hours.display_text}")

    async def _cmd_menu(self, restaurant_id: str) -> None:
        items = await self.services.menus.fetch_menu_items(restaurant_id)
        if not items:
            print("No menu items.")
            return
        for category, group in self.services.menus.group_by_category(items).items():
            print(f"\n{category.localized()}")
            for item in group:
                print(format_menu_item(item))

    async def _cmd_reviews(self, restaurant_id: str) -> None:
        reviews = await self.services.reviews.fetch_reviews(restaurant_id)
        if not reviews:
            print("No reviews yet.")
            return
        average = self.services.reviews.calculate_average_rating(reviews)
        print(f"Average rating: {average:.1f} from {len(reviews)} reviews")
        for review in reviews:
            print(format_review(review))

    async def _cmd_review(self, restaurant_id: str, rating: str, *words: str) -> None:
        request = ReviewRequest(
            restaurant_id=restaurant_id, rating=int(rating), comment=" ".join(words)
        )
        review = await self.services.reviews.submit_review(request)
        print(f"✓ Review posted ({review.id})")

    async def _cmd_search(self, *words: str) -> None:
        if not self.config.has_algolia_config():
            print("Search is disabled: set ALGOLIA_SEARCH_API_KEY.")
            return
        restaurants = await self.services.search.search(" ".join(words))
        self._print_restaurants(restaurants)

    async def _cmd_signin(self, email: str, password: str) -> None:
        await self.services.auth.sign_in(email, password)
        user = self.services.auth.current_user
        print(f"✓ Signed in as {user.display_name if user else email}")

    async def _cmd_signout(self) -> None:
        self.services.auth.sign_out()
        print("✓ Signed out")

    @staticmethod
    def _print_restaurants(restaurants: list[Restaurant]) -> None:
        if not restaurants:
            print("No restaurants found.")
            return
        for restaurant in restaurants:
            print(format_restaurant(restaurant))


def main() -> None:
    """Main entry point for the CLI."""
    try:
        # Validate configuration by attempting to load it
        get_config()
    except Exception as e:
        print(f"Configuration error: {e}")
        print("\nCheck the settings in your environment or .env file.")
        sys.exit(1)

    cli = PourRiceCLI()
    asyncio.run(cli.run())


if __name__ == "__main__":
    main()
