from .user import User, LANGUAGES
from .palm_reading import PalmReading
from .astrology_reading import AstrologyReading
from .translation import Translation


__all__ = [
    "User",
    "LANGUAGES",
    "PalmReading",
    "AstrologyReading",
    "Translation",
]
