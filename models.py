# models.py
from dataclasses import dataclass, field

ITEM_TYPES = ("character", "weapon")
BANNERS = ("character", "weapon", "standard", "chronicled", "unknown")

# end_id value meaning "from the newest record"
START_CURSOR = "0"


@dataclass
class WishItem:
    """
    One wish record, normalized from the provider's list entry.
    `banner` comes from the record's own gacha_type, not the requested one.
    """
    id: str
    name: str
    rarity: int
    item_type: str
    time: str
    banner: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "rarity": self.rarity,
            "itemType": self.item_type,
            "time": self.time,
            "banner": self.banner,
        }


@dataclass
class FetchCursor:
    """Paging state for a single gacha_type stream."""
    page: int = 1
    end_id: str = START_CURSOR
    seen_ids: set = field(default_factory=set)

    @property
    def has_cursor(self) -> bool:
        return self.end_id != START_CURSOR

    def advance(self, item_id: str) -> None:
        self.seen_ids.add(item_id)
        self.end_id = item_id

    def next_page(self) -> None:
        self.page += 1
