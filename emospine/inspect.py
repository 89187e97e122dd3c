"""Tooltip text for a hovered scene."""

from emospine.data import section_for
from emospine.encoding import emotion_group
from emospine.models import Record


def describe(record: Record) -> str:
    group = emotion_group(record.category)
    lines = [f"Scene {record.ordinal}"]
    section = section_for(record.ordinal)
    if section is not None:
        lines[0] += f" · {section.label}"
    lines.append(f"{record.category.title()} ({group.value.title()})")
    lines.append(f"Intensity {round(record.intensity * 100)}%")
    if record.secondary:
        lines.append("Also: " + ", ".join(record.secondary))
    if record.context:
        lines.append(record.context)
    if record.quote:
        lines.append(f'"{record.quote}" - {record.speaker}')
    return "\n".join(lines)
