"""Stock checks against a gift pack."""

from src.econ_supply.domain.models import GiftItem, InventoryItem, Shortage


def find_shortages(
    gifts: tuple[GiftItem, ...], inventory: list[InventoryItem]
) -> list[Shortage]:
    stock = {(i.item_id, i.quality): i.quantity for i in inventory}
    shortages: list[Shortage] = []
    for gift in gifts:
        available = stock.get((gift.item_id, gift.quality), 0)
        if available < gift.quantity:
            shortages.append(Shortage(gift.item_id, gift.quantity, available))
    return shortages
