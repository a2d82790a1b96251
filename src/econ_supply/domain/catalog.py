"""Job-change gift packs, per target class. Read-only pricing data."""

from types import MappingProxyType

from src.econ_common.cents import gold_to_cents
from src.econ_supply.domain.models import GiftItem


def _gift(
    item_id: str, name: str, description: str, base_gold: int,
    quantity: int = 1, quality: str = "COMMON",
) -> GiftItem:
    return GiftItem(item_id, name, description, quality, quantity, gold_to_cents(base_gold))


GIFT_CATALOG: MappingProxyType[str, tuple[GiftItem, ...]] = MappingProxyType({
    "NOVICE": (),
    "WARRIOR": (
        _gift("warrior-sword-iron", "Iron Longsword", "Standard blade of a new warrior", 150),
        _gift("warrior-shield-wood", "Wooden Shield", "Basic protection", 80),
        _gift("warrior-armor-leather", "Leather Armor", "Light body armor", 120),
        _gift("warrior-manual-basic", "Basic Tactics Manual", "A warrior's first handbook", 50),
    ),
    "MAGE": (
        _gift("mage-staff-apprentice", "Apprentice Staff", "Amplifies spell power", 200,
              quality="UNCOMMON"),
        _gift("mage-robe-novice", "Novice Robe", "Speeds mana recovery", 180),
        _gift("mage-crystals-mana", "Mana Crystal", "Stores raw mana", 30, quantity=5),
        _gift("mage-tome-elements", "Elements Primer", "Foundations of elemental magic", 150,
              quality="UNCOMMON"),
        _gift("mage-pouch-spell", "Spell Component Pouch", "Holds reagents", 75),
    ),
    "ARCHER": (
        _gift("archer-bow-composite", "Composite Bow", "Balanced range and power", 180),
        _gift("archer-arrows-steel", "Steel Arrow", "High quality arrows", 2, quantity=50),
        _gift("archer-quiver-leather", "Leather Quiver", "Roomy quiver", 60),
        _gift("archer-gloves-leather", "Archer Gloves", "Protects the draw hand", 45),
        _gift("archer-guide-hunting", "Hunting Guide", "Wilderness and tracking skills", 40),
    ),
    "ROGUE": (
        _gift("rogue-daggers-twin", "Twin Dagger", "Speed and precision", 90, quantity=2),
        _gift("rogue-cloak-shadow", "Shadow Cloak", "Improves stealth", 160,
              quality="UNCOMMON"),
        _gift("rogue-tools-lockpick", "Lockpick Set", "Tools for every lock", 85),
        _gift("rogue-boots-silent", "Silent Boots", "Muffle footsteps", 70),
        _gift("rogue-manual-stealth", "Stealth Manual", "A rogue's basic techniques", 35),
    ),
})


def gifts_for(target_class: str) -> tuple[GiftItem, ...]:
    return GIFT_CATALOG.get(target_class, ())


def gift_base_cost(gifts: tuple[GiftItem, ...]) -> int:
    return sum(g.line_value for g in gifts)
