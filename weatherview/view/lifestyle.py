"""Rule-based lifestyle recommendation.

Rules are evaluated in a fixed priority order and the first match wins:
rain/drizzle, snow, clear above 25°C, wind above 5 m/s, below 10°C, default.
"""

from dataclasses import dataclass
from enum import StrEnum


class RecommendationKind(StrEnum):
    UMBRELLA = "umbrella"
    BUNDLE_UP = "bundle_up"
    PICNIC = "picnic"
    SECURE_ITEMS = "secure_items"
    JACKET = "jacket"
    ENJOY = "enjoy"


@dataclass(frozen=True)
class Recommendation:
    kind: RecommendationKind
    text: str
    icon: str


RECOMMENDATIONS: dict[RecommendationKind, Recommendation] = {
    RecommendationKind.UMBRELLA: Recommendation(
        RecommendationKind.UMBRELLA, "Don't forget your umbrella!", "umbrella"
    ),
    RecommendationKind.BUNDLE_UP: Recommendation(
        RecommendationKind.BUNDLE_UP, "Bundle up, it's snowing!", "snowflake"
    ),
    RecommendationKind.PICNIC: Recommendation(
        RecommendationKind.PICNIC, "It's a great day for a picnic!", "sun"
    ),
    RecommendationKind.SECURE_ITEMS: Recommendation(
        RecommendationKind.SECURE_ITEMS,
        "It's windy! Secure any loose items outside.",
        "wind",
    ),
    RecommendationKind.JACKET: Recommendation(
        RecommendationKind.JACKET, "Remember to wear a jacket!", "tshirt"
    ),
    RecommendationKind.ENJOY: Recommendation(
        RecommendationKind.ENJOY, "Enjoy your day!", "sun"
    ),
}

PICNIC_MIN_TEMP_C = 25.0
WINDY_MIN_SPEED_MS = 5.0
JACKET_MAX_TEMP_C = 10.0


def recommend(temperature: float, condition: str, wind_speed: float) -> Recommendation:
    c = condition.lower()
    if "rain" in c or "drizzle" in c:
        kind = RecommendationKind.UMBRELLA
    elif "snow" in c:
        kind = RecommendationKind.BUNDLE_UP
    elif "clear" in c and temperature > PICNIC_MIN_TEMP_C:
        kind = RecommendationKind.PICNIC
    elif wind_speed > WINDY_MIN_SPEED_MS:
        kind = RecommendationKind.SECURE_ITEMS
    elif temperature < JACKET_MAX_TEMP_C:
        kind = RecommendationKind.JACKET
    else:
        kind = RecommendationKind.ENJOY
    return RECOMMENDATIONS[kind]
