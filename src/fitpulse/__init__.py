"""fitpulse: workout recommendations, streaks and achievements."""

__version__ = "0.1.0"
