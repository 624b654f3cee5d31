"""
Gravity Fields
==============
Surface gravity for the bodies offered by the launch selector, with the
background and grid colours the renderer uses for each of them.

Values (m/s²) from the NASA planetary fact sheets, rounded.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError


@dataclass(frozen=True)
class GravityField:
    """Constant downward acceleration applied for a whole run."""
    gravity: float = 9.81            # m/s²
    name: Optional[str] = None

    def __post_init__(self):
        try:
            g = float(self.gravity)
        except (TypeError, ValueError):
            raise ValidationError('gravity', self.gravity, "must be a number") from None
        if not np.isfinite(g) or g <= 0:
            raise ValidationError('gravity', g, "must be a finite number > 0")
        object.__setattr__(self, 'gravity', g)


# ══════════════════════════════════════════════════════════════════════════
#  Planet table — gravity plus display colours
# ══════════════════════════════════════════════════════════════════════════

EARTH_DATA = {
    'name': 'Earth',
    'gravity': 9.81,
    'bg_color': '#e6f0ff',
    'grid_color': '#000000',
}

MOON_DATA = {
    'name': 'Moon',
    'gravity': 1.62,
    'bg_color': '#d2d2d2',
    'grid_color': '#a9a9a9',
}

MARS_DATA = {
    'name': 'Mars',
    'gravity': 3.72,
    'bg_color': '#ffc8b4',
    'grid_color': '#a52a2a',
}

VENUS_DATA = {
    'name': 'Venus',
    'gravity': 8.87,
    'bg_color': '#ffdc96',
    'grid_color': '#ffa500',
}

JUPITER_DATA = {
    'name': 'Jupiter',
    'gravity': 24.79,
    'bg_color': '#f5e1b4',
    'grid_color': '#8b4513',
}

MERCURY_DATA = {
    'name': 'Mercury',
    'gravity': 3.7,
    'bg_color': '#c8c8c8',
    'grid_color': '#808080',
}

ALL_PLANETS = {
    'earth': EARTH_DATA,
    'moon': MOON_DATA,
    'mars': MARS_DATA,
    'venus': VENUS_DATA,
    'jupiter': JUPITER_DATA,
    'mercury': MERCURY_DATA,
}

DEFAULT_PLANET = 'earth'


def get_planet(key: str) -> dict:
    """Look up a planet entry by key (case-insensitive)."""
    try:
        return ALL_PLANETS[key.lower()]
    except KeyError:
        raise ValidationError('planet', key,
                              f"unknown body, choose from {sorted(ALL_PLANETS)}") from None


def gravity_field(key: str) -> GravityField:
    data = get_planet(key)
    return GravityField(gravity=data['gravity'], name=data['name'])
