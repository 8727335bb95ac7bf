import json
import re
from dataclasses import dataclass, field, fields, replace

# --- DEFAULT TEMPLATE (Steinfeld parish bulletin) ---
DEFAULT_LOCATIONS = ["Steinfeld", "Hausen", "Waldzell"]
DEFAULT_WEEKDAYS = ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"]
DEFAULT_CANCEL_KEYWORDS = ["entfällt", "entfallt"]

# Cut "Messfeier f. verstorbene Eltern" down to "Messfeier"
DEFAULT_FOOTNOTE_SPLITTERS = [r"\s+f[.\s]", r"\s+für\s+"]
# Whole lines like "f. verstorbene Eltern" / "für die Pfarrgemeinde"
DEFAULT_FOOTNOTE_PREFIXES = [r"^f[.\s]", r"^für\s+"]

DEFAULT_HEADER_MARKERS = ["S t e i n f e l d", "Mariä Himmelfahrt", "St. Cyriakus"]


@dataclass
class BulletinConfig:
    """
    Grammar and layout constants for one bulletin template.

    Every list can be overridden from a Firestore doc (config/bulletin)
    or a JSON file, see from_dict().
    """
    locations: list = field(default_factory=lambda: list(DEFAULT_LOCATIONS))
    weekdays: list = field(default_factory=lambda: list(DEFAULT_WEEKDAYS))
    cancel_keywords: list = field(default_factory=lambda: list(DEFAULT_CANCEL_KEYWORDS))
    footnote_splitters: list = field(default_factory=lambda: list(DEFAULT_FOOTNOTE_SPLITTERS))
    footnote_prefixes: list = field(default_factory=lambda: list(DEFAULT_FOOTNOTE_PREFIXES))
    header_markers: list = field(default_factory=lambda: list(DEFAULT_HEADER_MARKERS))
    divider_min_length: int = 20
    line_tolerance: float = 5.0
    event_duration_minutes: int = 60
    placeholder_summary: str = "Church Event"
    timezone: str = "Europe/Berlin"
    date_format: str = "%d.%m.%Y"

    @classmethod
    def from_dict(cls, data):
        """Build a config from a plain mapping. Unknown keys are ignored."""
        if not data:
            return cls()

        base = cls()
        overrides = {}
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            value = data[f.name]
            default = getattr(base, f.name)

            if isinstance(default, list):
                if isinstance(value, str) or not isinstance(value, (list, tuple)):
                    raise ValueError(f"Config '{f.name}' must be a list, got {type(value).__name__}")
                value = [str(v) for v in value]
            elif not isinstance(value, (int, float, str)):
                raise ValueError(f"Config '{f.name}' has unsupported type {type(value).__name__}")
            elif isinstance(default, (int, float)):
                try:
                    value = type(default)(value)
                except (TypeError, ValueError):
                    raise ValueError(f"Config '{f.name}' must be numeric, got {value!r}")
            else:
                value = str(value)
            overrides[f.name] = value

        config = replace(base, **overrides)
        config.validate()
        return config

    def validate(self):
        if not self.locations:
            raise ValueError("Config 'locations' must not be empty")
        if not self.weekdays:
            raise ValueError("Config 'weekdays' must not be empty")
        if self.line_tolerance <= 0:
            raise ValueError("Config 'line_tolerance' must be positive")
        if self.event_duration_minutes < 0:
            raise ValueError("Config 'event_duration_minutes' must not be negative")
        for pattern in self.footnote_splitters + self.footnote_prefixes:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid footnote pattern {pattern!r}: {e}")

    def to_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config_file(path):
    """Read a JSON override file (same keys as the Firestore doc)."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return BulletinConfig.from_dict(data)
