"""holdfast — single-lane tower-defense combat simulation core."""

__version__ = "0.1.0"
