"""
Report templates for HTML data tables.

A template is an immutable color preset applied when a result table is
rendered into a notification body.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TemplateName(Enum):
    """Named color presets."""
    DEFAULT = "Default"
    RED_REPORT = "RedReport"
    YELLOW = "Yellow"
    YELLOW_REPORT = "YellowReport"

    @classmethod
    def parse(cls, value: str | None) -> TemplateName:
        """
        Parse a preset name case-insensitively.

        Empty values select DEFAULT.

        Raises:
            ValueError: If the name is not a known preset
        """
        if value is None or not str(value).strip():
            return cls.DEFAULT
        wanted = str(value).strip().replace("_", "").lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValueError(f"Unknown report template: {value!r}")


@dataclass(frozen=True)
class ReportTemplate:
    """Colors used for the header row and alternating body rows."""
    header_font_color: str
    header_background_color: str
    use_alternate_row_colors: bool = False
    alternate_row_color: str | None = None


DEFAULT_TEMPLATE = ReportTemplate(
    header_font_color="white",
    header_background_color="FF0000",
)

RED_REPORT_TEMPLATE = ReportTemplate(
    header_font_color="white",
    header_background_color="FF0000",
    use_alternate_row_colors=True,
    alternate_row_color="F2F2F2",
)

YELLOW_TEMPLATE = ReportTemplate(
    header_font_color="black",
    header_background_color="FFFF00",
)

YELLOW_REPORT_TEMPLATE = ReportTemplate(
    header_font_color="black",
    header_background_color="FFFF00",
    use_alternate_row_colors=True,
    alternate_row_color="F2F2F2",
)

_TEMPLATES = {
    TemplateName.DEFAULT: DEFAULT_TEMPLATE,
    TemplateName.RED_REPORT: RED_REPORT_TEMPLATE,
    TemplateName.YELLOW: YELLOW_TEMPLATE,
    TemplateName.YELLOW_REPORT: YELLOW_REPORT_TEMPLATE,
}


def get_template(name: TemplateName | str | None = None) -> ReportTemplate:
    """Return the preset for ``name``; no name selects the default preset."""
    if not isinstance(name, TemplateName):
        name = TemplateName.parse(name)
    return _TEMPLATES[name]
