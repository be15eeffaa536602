"""Static car catalog: brands, models, pick-up locations and daily prices."""

from __future__ import annotations

CAR_BRANDS: tuple[str, ...] = (
    "Toyota",
    "Honda",
    "BMW",
    "Mercedes",
    "Audi",
    "Volkswagen",
    "Hyundai",
    "Kia",
    "Nissan",
    "Ford",
    "Chevrolet",
    "Tesla",
    "Mazda",
    "Subaru",
    "Mitsubishi",
    "Jaguar",
    "Land Rover",
    "Volvo",
)

ACCRA_LOCATIONS: tuple[str, ...] = (
    "Accra Mall",
    "Kotoka International Airport",
    "University of Ghana",
    "Labone Beach",
    "Osu Oxford Street",
    "Aburi Botanical Gardens",
    "Independence Square",
    "Kwame Nkrumah Memorial Park",
    "Art Centre",
    "Makola Market",
    "Tema Port",
    "Ashongman Estate",
    "East Legon",
    "Airport Residential Area",
    "Cantonments",
    "Dzorwulu",
    "Labone",
)

CAR_MODELS: dict[str, tuple[str, ...]] = {
    "Toyota": ("Camry", "Corolla", "RAV4", "Highlander", "Prius", "Yaris"),
    "Honda": ("Accord", "Civic", "CR-V", "Pilot", "Fit", "HR-V"),
    "BMW": ("3 Series", "5 Series", "X3", "X5", "7 Series", "2 Series"),
    "Mercedes": ("C-Class", "E-Class", "GLC", "GLE", "S-Class", "A-Class"),
    "Audi": ("A4", "A6", "Q5", "Q7", "A3", "Q3"),
    "Tesla": ("Model 3", "Model S", "Model X", "Model Y"),
    "Hyundai": ("Elantra", "Santa Fe", "Tucson", "Sonata", "Kona", "Palisade"),
    "Kia": ("Optima", "Sorento", "Sportage", "Forte", "Telluride", "Soul"),
}

#: Base rental price per day, by brand.
BASE_DAILY_PRICES: dict[str, int] = {
    "Toyota": 50,
    "Honda": 55,
    "BMW": 120,
    "Mercedes": 130,
    "Audi": 115,
    "Tesla": 150,
    "Hyundai": 45,
    "Kia": 40,
}

#: Applied to any brand missing from :data:`BASE_DAILY_PRICES`.
DEFAULT_DAILY_PRICE = 60


def get_car_brands() -> list[str]:
    return list(CAR_BRANDS)


def get_accra_locations() -> list[str]:
    return list(ACCRA_LOCATIONS)


def get_car_models(brand: str) -> list[str]:
    """Models offered for *brand*; empty for brands without a model list."""
    return list(CAR_MODELS.get(brand, ()))


def base_daily_price(brand: str) -> int:
    return BASE_DAILY_PRICES.get(brand, DEFAULT_DAILY_PRICE)


def calculate_booking_price(car_brand: str, car_model: str | None, days: int | float) -> int | float:
    """Rental price for *days* days.

    The model does not influence the price; only the brand's base daily
    rate does.
    """
    del car_model
    return base_daily_price(car_brand) * days
