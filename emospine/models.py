"""Pydantic models for the emotional spine."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

RGB = tuple[int, int, int]
Vec3 = tuple[float, float, float]

UNKNOWN_SPEAKER = "Unknown"


class EdgeKind(str, Enum):
    CHRONOLOGICAL = "chronological"
    BY_SPEAKER = "by-speaker"
    BY_CATEGORY = "by-category"


class HighlightState(str, Enum):
    NEUTRAL = "neutral"
    ACTIVE = "active"
    RELATED = "related"
    DIMMED = "dimmed"


# --- Input records ---


class Record(BaseModel):
    """One annotated scene. Intensity is always on the normalized [0, 1] scale."""
    model_config = ConfigDict(frozen=True)

    ordinal: int
    category: str
    intensity: float = Field(ge=0.0, le=1.0)
    secondary: tuple[str, ...] = ()
    context: str = ""
    quote: str = ""
    speaker: str = UNKNOWN_SPEAKER

    @field_validator("category")
    @classmethod
    def _lower_category(cls, v: str) -> str:
        return v.strip().lower() or "other"

    @field_validator("speaker")
    @classmethod
    def _default_speaker(cls, v: str) -> str:
        return v.strip() or UNKNOWN_SPEAKER

    @property
    def speaker_key(self) -> str:
        return self.speaker.strip().lower()


# --- Layout output ---


class Satellite(BaseModel):
    """Secondary-emotion particle orbiting a primary entity. Not hit-testable."""
    label: str
    position: Vec3
    size: float
    opacity: float
    color: RGB


class PositionedEntity(BaseModel):
    """A record placed on the guide curve with its visual encoding."""
    ordinal: int  # back-reference to the source Record
    category: str
    speaker: str
    position: Vec3
    angle: float
    size: float
    render_size: float  # size including the blur halo
    opacity: float
    blur: float
    color: RGB
    satellites: list[Satellite] = Field(default_factory=list)

    @property
    def speaker_key(self) -> str:
        return self.speaker.strip().lower()


# --- Relationship graphs ---


class EdgeStyle(BaseModel):
    width: float
    opacity: float
    color: RGB
    dash: tuple[float, ...] | None = None
    blending: str = "normal"  # "normal" or "additive"


class Edge(BaseModel):
    kind: EdgeKind
    source: int
    target: int
    group: str | None = None
    style: EdgeStyle

    @property
    def key(self) -> str:
        return f"{self.kind.value}:{self.source}-{self.target}"

    def touches(self, ordinal: int) -> bool:
        return ordinal in (self.source, self.target)


class EdgeSets(BaseModel):
    chronological: list[Edge] = Field(default_factory=list)
    by_speaker: list[Edge] = Field(default_factory=list)
    by_category: list[Edge] = Field(default_factory=list)

    def of_kind(self, kind: EdgeKind) -> list[Edge]:
        return {
            EdgeKind.CHRONOLOGICAL: self.chronological,
            EdgeKind.BY_SPEAKER: self.by_speaker,
            EdgeKind.BY_CATEGORY: self.by_category,
        }[kind]

    def all(self) -> list[Edge]:
        return [*self.chronological, *self.by_speaker, *self.by_category]

    def __len__(self) -> int:
        return len(self.chronological) + len(self.by_speaker) + len(self.by_category)


# --- Interaction ---


class InteractionSnapshot(BaseModel):
    """Complete highlight state for one moment. Replaced wholesale, never patched."""
    model_config = ConfigDict(frozen=True)

    active: int | None = None
    entities: dict[int, HighlightState] = Field(default_factory=dict)
    edges: dict[str, HighlightState] = Field(default_factory=dict)


class RenderPayload(BaseModel):
    """Everything a renderer needs for one frame of the visualization."""
    generation: int
    strategy: str
    entities: list[PositionedEntity]
    edges: EdgeSets
    interaction: InteractionSnapshot
