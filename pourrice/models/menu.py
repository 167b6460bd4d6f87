"""Menu item data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from pourrice.models.bilingual import BilingualText


class MenuCategory(str, Enum):
    """Section of a restaurant menu."""

    APPETISER = "Appetiser"
    MAIN_COURSE = "Main Course"
    DESSERT = "Dessert"
    BEVERAGE = "Beverage"
    SIDE = "Side"

    @property
    def label(self) -> BilingualText:
        return _CATEGORY_LABELS[self]

    def localized(self, language: str | None = None) -> str:
        return self.label.localized(language)


class DietaryTag(str, Enum):
    """Dietary information attached to a menu item."""

    VEGETARIAN = "Vegetarian"
    VEGAN = "Vegan"
    GLUTEN_FREE = "Gluten-Free"
    DAIRY_FREE = "Dairy-Free"
    NUT_FREE = "Nut-Free"
    HALAL = "Halal"
    SEAFOOD = "Seafood"
    SPICY = "Spicy"

    @property
    def label(self) -> BilingualText:
        return _DIETARY_LABELS[self]

    def localized(self, language: str | None = None) -> str:
        return self.label.localized(language)


_CATEGORY_LABELS = {
    MenuCategory.APPETISER: BilingualText(en="Appetiser", tc="前菜"),
    MenuCategory.MAIN_COURSE: BilingualText(en="Main Course", tc="主菜"),
    MenuCategory.DESSERT: BilingualText(en="Dessert", tc="甜品"),
    MenuCategory.BEVERAGE: BilingualText(en="Beverage", tc="飲品"),
    MenuCategory.SIDE: BilingualText(en="Side", tc="配菜"),
}

_DIETARY_LABELS = {
    DietaryTag.VEGETARIAN: BilingualText(en="Vegetarian", tc="素食"),
    DietaryTag.VEGAN: BilingualText(en="Vegan", tc="純素"),
    DietaryTag.GLUTEN_FREE: BilingualText(en="Gluten-Free", tc="無麩質"),
    DietaryTag.DAIRY_FREE: BilingualText(en="Dairy-Free", tc="無奶"),
    DietaryTag.NUT_FREE: BilingualText(en="Nut-Free", tc="無果仁"),
    DietaryTag.HALAL: BilingualText(en="Halal", tc="清真"),
    DietaryTag.SEAFOOD: BilingualText(en="Seafood", tc="海鮮"),
    DietaryTag.SPICY: BilingualText(en="Spicy", tc="辣"),
}

MAX_SPICE_LEVEL = 5


class MenuItem(BaseModel):
    """A dish or drink on a restaurant's menu."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="menuItemId")
    restaurant_id: str = Field(..., alias="restaurantId")
    name: BilingualText
    description: BilingualText
    price: float = Field(..., ge=0.0, description="Price in HKD")
    category: MenuCategory
    image_url: str | None = Field(None, alias="imageUrl")
    dietary_info: list[DietaryTag] = Field(default_factory=list, alias="dietaryInfo")
    is_available: bool = Field(True, alias="isAvailable")
    spice_level: int | None = Field(
        None,
        ge=0,
        le=MAX_SPICE_LEVEL,
        alias="spiceLevel",
        description="0 or absent means not spicy",
    )

    @property
    def price_display(self) -> str:
        return f"HK${self.price:.2f}"

    @property
    def dietary_info_display(self) -> str:
        return ", ".join(tag.value for tag in self.dietary_info)

    @property
    def spice_level_display(self) -> str | None:
        if not self.spice_level:
            return None
        return "🌶️" * self.spice_level


class MenuItemListResponse(BaseModel):
    """Envelope for the restaurant menu endpoint."""

    menu_items: list[MenuItem] = Field(..., alias="menuItems")
