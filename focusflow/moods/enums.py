"""
FOCUSFLOW Analytics API - Mood Vocabulary
"""

from enum import Enum


class MoodName(str, Enum):
    """Moods offered by the mood logger. Other names are stored as given."""
    ENERGETIC = "Energetic"
    HAPPY = "Happy"
    CALM = "Calm"
    TIRED = "Tired"
    STRESSED = "Stressed"
    SAD = "Sad"
    ANGRY = "Angry"
    ANXIOUS = "Anxious"


def canonical_mood_name(name: str) -> str:
    """Match known moods case-insensitively ('happy' -> 'Happy'); keep others verbatim."""
    cleaned = name.strip()
    for mood in MoodName:
        if mood.value.lower() == cleaned.lower():
            return mood.value
    return cleaned
