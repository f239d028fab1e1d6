"""Decorative particles seeded from the current condition. Cosmetic only."""

import random
from dataclasses import dataclass
from enum import StrEnum


class ParticleKind(StrEnum):
    DROP = "drop"
    SNOWFLAKE = "snowflake"
    CLOUD = "cloud"


@dataclass(frozen=True)
class Particle:
    kind: ParticleKind
    left_pct: float
    duration_s: float
    delay_s: float
    top_pct: float | None = None


def particles_for(
    condition: str | None,
    rng: random.Random | None = None,
    count: int = 100,
    cloud_count: int = 5,
) -> tuple[Particle, ...]:
    if rng is None:
        rng = random.Random()
    key = (condition or "").lower()

    if key == "rain":
        return tuple(
            Particle(
                kind=ParticleKind.DROP,
                left_pct=rng.random() * 100,
                duration_s=0.5 + rng.random() * 0.5,
                delay_s=rng.random() * 2,
            )
            for _ in range(count)
        )
    if key == "snow":
        return tuple(
            Particle(
                kind=ParticleKind.SNOWFLAKE,
                left_pct=rng.random() * 100,
                duration_s=5 + rng.random() * 10,
                delay_s=rng.random() * 5,
            )
            for _ in range(count)
        )
    if key == "clouds":
        return tuple(
            Particle(
                kind=ParticleKind.CLOUD,
                top_pct=rng.random() * 40,
                left_pct=-10 - rng.random() * 10,
                duration_s=20 + rng.random() * 10,
                delay_s=rng.random() * 5,
            )
            for _ in range(cloud_count)
        )
    return ()
