"""Color and intensity encoding for scene particles.

Maps an emotion category to a color and a normalized intensity (0..1) to the
particle's size, opacity and blur. Size follows a quartic response so the
strongest scenes dominate: half intensity gets 1/16 of the size range.
Below the blur threshold particles grow a soft halo and fade; at or above it
they are drawn fully solid.
"""

from enum import Enum

from emospine.config import EncodingConfig
from emospine.models import RGB

_DEFAULTS = EncodingConfig()


class Emotion(str, Enum):
    DREAD = "dread"
    HORROR = "horror"
    BETRAYAL = "betrayal"
    ANGER = "anger"
    REVENGE = "revenge"
    REVULSION = "revulsion"
    HUMILIATION = "humiliation"
    GRIEF = "grief"
    DESPAIR = "despair"
    LONELINESS = "loneliness"
    FOREBODING = "foreboding"
    UNEASE = "unease"
    ANXIETY = "anxiety"
    BITTERSWEET = "bittersweet"
    DESPERATION = "desperation"
    HOPE = "hope"
    WONDER = "wonder"
    RELIEF = "relief"
    ANTICIPATION = "anticipation"
    CURIOSITY = "curiosity"
    AWE = "awe"
    TENSION = "tension"
    SHOCK = "shock"
    WARMTH = "warmth"


class EmotionGroup(str, Enum):
    FEAR = "fear"
    ANGER = "anger"
    SADNESS = "sadness"
    HOPE = "hope"
    CURIOSITY = "curiosity"
    OTHER = "other"


def _hex(value: int) -> RGB:
    return ((value >> 16) & 255, (value >> 8) & 255, value & 255)


# --- Colors ---

# Gothic palette: reds for fear/anger, purples for grief, teals for hope
EMOTION_COLORS: dict[Emotion, RGB] = {
    Emotion.DREAD: _hex(0xC41E3A),
    Emotion.HORROR: _hex(0xFF1744),
    Emotion.BETRAYAL: _hex(0xD32F2F),
    Emotion.ANGER: _hex(0xF57C00),
    Emotion.REVENGE: _hex(0xB71C1C),
    Emotion.REVULSION: _hex(0xA81A4A),
    Emotion.HUMILIATION: _hex(0xC2185B),
    Emotion.GRIEF: _hex(0x7B1FA2),
    Emotion.DESPAIR: _hex(0x512DA8),
    Emotion.LONELINESS: _hex(0x673AB7),
    Emotion.FOREBODING: _hex(0x1A237E),
    Emotion.UNEASE: _hex(0x0277BD),
    Emotion.ANXIETY: _hex(0x01579B),
    Emotion.BITTERSWEET: _hex(0x6A1B9A),
    Emotion.DESPERATION: _hex(0x4527A0),
    Emotion.HOPE: _hex(0x00695C),
    Emotion.WONDER: _hex(0x00838F),
    Emotion.RELIEF: _hex(0x0288D1),
    Emotion.ANTICIPATION: _hex(0x0097A7),
    Emotion.CURIOSITY: _hex(0x1976D2),
    Emotion.AWE: _hex(0x8B6F47),
    Emotion.TENSION: _hex(0x9C6C27),
    Emotion.SHOCK: _hex(0xF9A825),
    Emotion.WARMTH: _hex(0xD4863E),
}

# Fallback for unmapped categories
DEFAULT_COLOR: RGB = (204, 204, 204)

EMOTION_GROUPS: dict[Emotion, EmotionGroup] = {
    Emotion.DREAD: EmotionGroup.FEAR,
    Emotion.HORROR: EmotionGroup.FEAR,
    Emotion.FOREBODING: EmotionGroup.FEAR,
    Emotion.UNEASE: EmotionGroup.FEAR,
    Emotion.ANXIETY: EmotionGroup.FEAR,
    Emotion.SHOCK: EmotionGroup.FEAR,
    Emotion.TENSION: EmotionGroup.FEAR,
    Emotion.REVULSION: EmotionGroup.FEAR,
    Emotion.BETRAYAL: EmotionGroup.ANGER,
    Emotion.ANGER: EmotionGroup.ANGER,
    Emotion.REVENGE: EmotionGroup.ANGER,
    Emotion.HUMILIATION: EmotionGroup.ANGER,
    Emotion.DESPERATION: EmotionGroup.ANGER,
    Emotion.GRIEF: EmotionGroup.SADNESS,
    Emotion.DESPAIR: EmotionGroup.SADNESS,
    Emotion.LONELINESS: EmotionGroup.SADNESS,
    Emotion.BITTERSWEET: EmotionGroup.SADNESS,
    Emotion.HOPE: EmotionGroup.HOPE,
    Emotion.RELIEF: EmotionGroup.HOPE,
    Emotion.WARMTH: EmotionGroup.HOPE,
    Emotion.ANTICIPATION: EmotionGroup.HOPE,
    Emotion.CURIOSITY: EmotionGroup.CURIOSITY,
    Emotion.WONDER: EmotionGroup.CURIOSITY,
    Emotion.AWE: EmotionGroup.CURIOSITY,
}

# Legend swatches per group
GROUP_COLORS: dict[EmotionGroup, RGB] = {
    EmotionGroup.ANGER: _hex(0xFF3EAD),
    EmotionGroup.HOPE: _hex(0xFFAB56),
    EmotionGroup.FEAR: _hex(0x68FFA2),
    EmotionGroup.SADNESS: _hex(0x47F2FF),
    EmotionGroup.CURIOSITY: _hex(0xC444FF),
    EmotionGroup.OTHER: DEFAULT_COLOR,
}


def parse_emotion(category: str) -> Emotion | None:
    """Return the Emotion for a category label, or None if it is not in the palette."""
    try:
        return Emotion(category.strip().lower())
    except (ValueError, AttributeError):
        return None


def resolve_color(category: str) -> RGB:
    """Map a category to its palette color. Never raises."""
    emotion = parse_emotion(category)
    if emotion is None:
        return DEFAULT_COLOR
    return EMOTION_COLORS[emotion]


def emotion_group(category: str) -> EmotionGroup:
    emotion = parse_emotion(category)
    if emotion is None:
        return EmotionGroup.OTHER
    return EMOTION_GROUPS.get(emotion, EmotionGroup.OTHER)


def lighten(color: RGB, factor: float) -> RGB:
    """Tint a color toward white. factor 0 leaves it unchanged, 1 gives white."""
    f = _clamp(factor)
    return tuple(round(c + (255 - c) * f) for c in color)  # type: ignore[return-value]


def to_hex(color: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


# --- Intensity ---


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def resolve_size(
    intensity: float,
    min_size: float = _DEFAULTS.min_size,
    max_size: float = _DEFAULTS.max_size,
) -> float:
    """Quartic size response: 0.5 intensity -> min + 0.0625 * range, 1.0 -> max."""
    return min_size + _clamp(intensity) ** 4 * (max_size - min_size)


def resolve_blur(intensity: float, config: EncodingConfig = _DEFAULTS) -> float:
    """Blur amount, zero at or above the threshold and max_blur at zero intensity."""
    i = _clamp(intensity)
    if i >= config.solid_threshold or i >= config.blur_threshold:
        return 0.0
    return (config.blur_threshold - i) / config.blur_threshold * config.max_blur


def blur_size_scale(intensity: float, config: EncodingConfig = _DEFAULTS) -> float:
    """Blurred particles are drawn larger so they read as out of focus."""
    blur = resolve_blur(intensity, config)
    if blur == 0.0:
        return 1.0
    return 1.0 + (blur / config.max_blur) * 1.5


def resolve_opacity(intensity: float, config: EncodingConfig = _DEFAULTS) -> float:
    """Opacity tracks intensity; blurred particles fade further, near-max is fully solid."""
    i = _clamp(intensity)
    if i >= config.solid_threshold:
        return 1.0
    blur = resolve_blur(i, config)
    if blur > 0.0:
        return i * (0.5 + (blur / config.max_blur) * 0.5)
    return i
