"""The ten companies a fresh market opens with."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CompanySeed:
    name: str
    ticker: str
    sector: str
    description: str
    price: int                 # cents
    dividend_yield: float
    pe_ratio: float


DEFAULT_COMPANIES: tuple[CompanySeed, ...] = (
    CompanySeed(
        "Deepstone Gem Mining", "GEMS", "RESOURCES",
        "Leading miner of rare gems and minerals", 4_550, 3.2, 18.5,
    ),
    CompanySeed(
        "Arcane Crystal Group", "MCRYS", "RESOURCES",
        "Mana crystal extraction and refining", 8_920, 2.8, 22.1,
    ),
    CompanySeed(
        "Flying Dragon Express", "FLYDR", "TRANSPORT",
        "Cross-continent air freight and logistics", 3_475, 4.1, 15.3,
    ),
    CompanySeed(
        "Portal Transit", "PORTAL", "TRANSPORT",
        "Operator of the teleport portal network", 12_560, 1.9, 28.7,
    ),
    CompanySeed(
        "Magitech Industries", "MTECH", "TECHNOLOGY",
        "Fusing magic and machinery", 15_680, 0.8, 45.2,
    ),
    CompanySeed(
        "Alchemy Innovations", "ALCHEM", "TECHNOLOGY",
        "Advanced alchemical research", 7_830, 1.5, 35.8,
    ),
    CompanySeed(
        "Adventurers Guild Alliance", "ADVGLD", "SERVICES",
        "Quest brokerage and adventurer services", 6_790, 5.2, 12.8,
    ),
    CompanySeed(
        "Academy of Magic Group", "MAGIC", "SERVICES",
        "Magical education and research", 9_845, 2.3, 19.7,
    ),
    CompanySeed(
        "Kingdom Central Bank", "KCBANK", "FINANCE",
        "The realm's largest financial institution", 11_230, 6.8, 11.2,
    ),
    CompanySeed(
        "Divine Smith Armory", "WEAPON", "MANUFACTURING",
        "Maker of high-grade weapons and armor", 5_270, 3.8, 16.4,
    ),
)
