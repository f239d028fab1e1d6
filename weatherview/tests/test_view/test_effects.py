"""Tests for decorative particles and icon URLs."""

import random

from weatherview.view.effects import ParticleKind, particles_for
from weatherview.view.icons import icon_url


class TestParticles:
    def test_rain(self):
        drops = particles_for("Rain", random.Random(1))
        assert len(drops) == 100
        assert all(d.kind == ParticleKind.DROP for d in drops)
        assert all(0 <= d.left_pct <= 100 for d in drops)
        assert all(0.5 <= d.duration_s <= 1.0 for d in drops)
        assert all(0 <= d.delay_s <= 2 for d in drops)

    def test_snow(self):
        flakes = particles_for("snow", random.Random(2))
        assert len(flakes) == 100
        assert all(5 <= f.duration_s <= 15 for f in flakes)

    def test_clouds(self):
        clouds = particles_for("Clouds", random.Random(3))
        assert len(clouds) == 5
        assert all(-20 <= c.left_pct <= -10 for c in clouds)
        assert all(c.top_pct is not None and 0 <= c.top_pct <= 40 for c in clouds)

    def test_other_conditions_empty(self):
        assert particles_for("Clear") == ()
        assert particles_for("Thunderstorm") == ()
        assert particles_for(None) == ()

    def test_seeded_rng_is_reproducible(self):
        assert particles_for("Rain", random.Random(7)) == particles_for("Rain", random.Random(7))


class TestIconUrl:
    def test_small(self):
        assert icon_url("01d", "https://cdn.example.com/img/wn") == (
            "https://cdn.example.com/img/wn/01d.png"
        )

    def test_large_and_trailing_slash(self):
        assert icon_url("10n", "https://cdn.example.com/img/wn/", large=True) == (
            "https://cdn.example.com/img/wn/10n@2x.png"
        )
