"""The world-event template library.

Fourteen templates across the eight categories. Impact percentages are the
sector baseline; each company gets its own jittered copy at trigger time.
"""

from src.econ_events.domain.models import EventTemplate, SectorImpact

_IMM = "IMMEDIATE"
_GRAD = "GRADUAL"
_DELAY = "DELAYED"

EVENT_TEMPLATES: tuple[EventTemplate, ...] = (
    # Disasters
    EventTemplate(
        event_type="DISASTER",
        title="Mine Collapse",
        description="A major mining district has caved in, cutting gem and ore supply",
        severity=4,
        duration_hours=72,
        global_impact=False,
        sector_impacts=(
            SectorImpact("RESOURCES", -15, _IMM),
            SectorImpact("MANUFACTURING", -8, _GRAD),
        ),
    ),
    EventTemplate(
        event_type="DISASTER",
        title="Arcane Storm",
        description="An unprecedented arcane storm has shut down every teleport portal",
        severity=5,
        duration_hours=48,
        global_impact=True,
        sector_impacts=(
            SectorImpact("TRANSPORT", -25, _IMM),
            SectorImpact("TECHNOLOGY", -12, _IMM),
            SectorImpact("SERVICES", -10, _GRAD),
        ),
    ),
    # Politics
    EventTemplate(
        event_type="POLITICAL",
        title="Tax Reform",
        description="The crown announces lower corporate taxes for technology firms",
        severity=3,
        duration_hours=168,
        global_impact=True,
        sector_impacts=(
            SectorImpact("TECHNOLOGY", 12, _GRAD),
            SectorImpact("FINANCE", 8, _IMM),
            SectorImpact("MANUFACTURING", -3, _GRAD),
        ),
    ),
    EventTemplate(
        event_type="POLITICAL",
        title="Sanctions Lifted",
        description="Trade sanctions with the neighbouring kingdom are lifted",
        severity=2,
        duration_hours=72,
        global_impact=False,
        sector_impacts=(
            SectorImpact("TRANSPORT", 18, _IMM),
            SectorImpact("SERVICES", 10, _GRAD),
        ),
    ),
    # Invasion
    EventTemplate(
        event_type="INVASION",
        title="Monster Invasion",
        description="A monster horde masses at the border and the realm goes to war",
        severity=5,
        duration_hours=120,
        global_impact=True,
        sector_impacts=(
            SectorImpact("MANUFACTURING", 20, _IMM),
            SectorImpact("TRANSPORT", -20, _IMM),
            SectorImpact("FINANCE", -15, _IMM),
            SectorImpact("SERVICES", -12, _GRAD),
        ),
    ),
    # Discoveries
    EventTemplate(
        event_type="DISCOVERY",
        title="New Ore Vein",
        description="Surveyors find a vast vein of rare minerals beneath ancient ruins",
        severity=3,
        duration_hours=96,
        global_impact=False,
        sector_impacts=(
            SectorImpact("RESOURCES", 25, _GRAD),
            SectorImpact("TECHNOLOGY", 8, _DELAY, 168),
        ),
    ),
    EventTemplate(
        event_type="DISCOVERY",
        title="Lost Civilization Ruins",
        description="Scholars uncover the magitech of a lost civilization",
        severity=4,
        duration_hours=240,
        global_impact=True,
        sector_impacts=(
            SectorImpact("TECHNOLOGY", 30, _DELAY, 72),
            SectorImpact("SERVICES", 15, _GRAD),
        ),
    ),
    # Trade
    EventTemplate(
        event_type="TRADE",
        title="Trade Alliance",
        description="The realm signs a free-trade pact with three allied kingdoms",
        severity=3,
        duration_hours=336,
        global_impact=True,
        sector_impacts=(
            SectorImpact("TRANSPORT", 22, _GRAD),
            SectorImpact("SERVICES", 15, _GRAD),
            SectorImpact("MANUFACTURING", 12, _DELAY, 168),
        ),
    ),
    # Economic policy
    EventTemplate(
        event_type="ECONOMIC",
        title="Rate Cut",
        description="The central bank cuts its rate by one point to spur growth",
        severity=3,
        duration_hours=720,
        global_impact=True,
        sector_impacts=(
            SectorImpact("FINANCE", 15, _IMM),
            SectorImpact("MANUFACTURING", 10, _GRAD),
            SectorImpact("TECHNOLOGY", 12, _GRAD),
            SectorImpact("SERVICES", 8, _GRAD),
        ),
    ),
    EventTemplate(
        event_type="ECONOMIC",
        title="Inflation Alert",
        description="Prices hit a record high and tighter money is on the table",
        severity=4,
        duration_hours=168,
        global_impact=True,
        sector_impacts=(
            SectorImpact("FINANCE", -12, _IMM),
            SectorImpact("SERVICES", -8, _GRAD),
            SectorImpact("MANUFACTURING", -6, _GRAD),
        ),
    ),
    # Technology
    EventTemplate(
        event_type="TECHNOLOGICAL",
        title="Portal Breakthrough",
        description="A new generation of portals makes transport far cheaper",
        severity=4,
        duration_hours=240,
        global_impact=True,
        sector_impacts=(
            SectorImpact("TECHNOLOGY", 35, _IMM),
            SectorImpact("TRANSPORT", 28, _GRAD),
            SectorImpact("SERVICES", 12, _DELAY, 120),
        ),
    ),
    EventTemplate(
        event_type="TECHNOLOGICAL",
        title="Automated Factory",
        description="The first fully automated arcane factory starts production",
        severity=3,
        duration_hours=168,
        global_impact=False,
        sector_impacts=(
            SectorImpact("MANUFACTURING", 25, _GRAD),
            SectorImpact("TECHNOLOGY", 18, _IMM),
        ),
    ),
    # Magic
    EventTemplate(
        event_type="MAGICAL",
        title="Mana Tide Anomaly",
        description="The world's mana tides swing wildly, unsettling every arcane trade",
        severity=4,
        duration_hours=96,
        global_impact=True,
        sector_impacts=(
            SectorImpact("TECHNOLOGY", -18, _IMM),
            SectorImpact("TRANSPORT", -15, _IMM),
            SectorImpact("SERVICES", -10, _GRAD),
        ),
    ),
    EventTemplate(
        event_type="MAGICAL",
        title="Academy Breakthrough",
        description="The academy publishes a theory that could remake applied magic",
        severity=5,
        duration_hours=480,
        global_impact=True,
        sector_impacts=(
            SectorImpact("SERVICES", 40, _GRAD),
            SectorImpact("TECHNOLOGY", 25, _DELAY, 240),
            SectorImpact("TRANSPORT", 15, _DELAY, 360),
        ),
    ),
)


def templates_for(event_type: str) -> list[EventTemplate]:
    return [t for t in EVENT_TEMPLATES if t.event_type == event_type]
