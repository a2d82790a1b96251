"""Suppliers a fresh network opens with, two per specialty."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SupplierSeed:
    name: str
    specialty: str
    location: str
    reputation: float
    markup_percentage: float


DEFAULT_SUPPLIERS: tuple[SupplierSeed, ...] = (
    SupplierSeed("Ironforge Outfitters", "WARRIOR", "Ironforge", 85.0, 20.0),
    SupplierSeed("Border Garrison Quartermaster", "WARRIOR", "Northwatch", 70.0, 15.0),
    SupplierSeed("Arcane Sundries", "MAGE", "Academy Quarter", 90.0, 25.0),
    SupplierSeed("Crystal Spire Emporium", "MAGE", "Skyreach", 75.0, 18.0),
    SupplierSeed("Greenwood Fletchers", "ARCHER", "Greenwood", 80.0, 20.0),
    SupplierSeed("Hunter's Lodge", "ARCHER", "Eastmarch", 65.0, 12.0),
    SupplierSeed("Night Market Broker", "ROGUE", "Lower City", 60.0, 10.0),
    SupplierSeed("Silent Step Tailors", "ROGUE", "Port Vesper", 78.0, 22.0),
)

OPENING_STOCK = 20
MINIMUM_STOCK = 5
RESTOCK_AMOUNT = 20
