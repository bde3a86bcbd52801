from dataclasses import dataclass, field
from typing import List, Literal, Optional


DataField = Literal["lists", "sequences", "compares", "items", "values", "nodes", "root"]

# Keywords that introduce a plain item list inside the data section.
LIST_DATA_FIELDS = ("lists", "sequences", "compares", "items", "values", "nodes")
DATA_FIELDS = LIST_DATA_FIELDS + ("root",)

# Serialization order for item fields; the first populated one goes on the "- " line.
FIELD_PRIORITY = ("id", "label", "time", "desc", "value", "icon")


@dataclass
class InfographicItem:
    label: Optional[str] = None
    desc: Optional[str] = None
    value: Optional[str] = None
    icon: Optional[str] = None
    time: Optional[str] = None
    # Only meaningful for relation nodes, but accepted everywhere.
    id: Optional[str] = None
    children: Optional[List["InfographicItem"]] = None

    def populated_fields(self) -> List[tuple[str, str]]:
        """Return ``(key, value)`` pairs for non-empty fields in priority order."""
        pairs: List[tuple[str, str]] = []
        for key in FIELD_PRIORITY:
            value = getattr(self, key)
            if value:
                pairs.append((key, value))
        return pairs


@dataclass
class InfographicTheme:
    mode: Optional[str] = None
    # Either a single named palette token ("antv") or a list of colors ("#fff").
    palette: Optional[List[str]] = None
    stylize: Optional[str] = None


@dataclass
class InfographicRelation:
    # Edge line kept verbatim, e.g. "A - approves -> B".
    raw: str


@dataclass
class InfographicDocument:
    template: str
    title: Optional[str] = None
    desc: Optional[str] = None
    data_field: DataField = "items"
    items: List[InfographicItem] = field(default_factory=list)
    relations: Optional[List[InfographicRelation]] = None
    theme: Optional[InfographicTheme] = None

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to render."""
        return not self.items and not self.relations
