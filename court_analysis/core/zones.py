"""Zone definitions, zone systems and court coordinate conventions."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

TENNIS_NET_POSITION = 11.885
TENNIS_FULL_COURT = 23.77
TENNIS_COURT_WIDTH = 10.97
PADEL_HALF_COURT = 10.0


@dataclass(frozen=True)
class ZoneDefinition:
    """Axis-aligned rectangular court region in meters."""
    id: str
    name: str
    x_min: float
    x_max: float
    y_min: float
    y_max: float
    is_pressure_zone: bool = False
    description: str = ""
    tactical_advice: str = ""

    def __post_init__(self):
        if self.x_min > self.x_max or self.y_min > self.y_max:
            raise ValueError(f"Zone '{self.id}' has inverted bounds")

    def contains(self, x: float, y: float) -> bool:
        """Check if a point is within this zone (bounds inclusive)."""
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'xMin': self.x_min,
            'xMax': self.x_max,
            'yMin': self.y_min,
            'yMax': self.y_max,
            'isPressureZone': self.is_pressure_zone,
            'description': self.description,
            'tacticalAdvice': self.tactical_advice
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ZoneDefinition':
        return cls(
            id=str(data['id']),
            name=str(data.get('name', data['id'])),
            x_min=float(data['xMin']),
            x_max=float(data['xMax']),
            y_min=float(data['yMin']),
            y_max=float(data['yMax']),
            is_pressure_zone=bool(data.get('isPressureZone', False)),
            description=str(data.get('description', '')),
            tactical_advice=str(data.get('tacticalAdvice', ''))
        )


@dataclass(frozen=True)
class ZoneModel:
    """
    Ordered partition scheme of a court.

    Zones may leave gaps; where they overlap, the first listed zone wins.
    """
    id: str
    name: str
    zones: Tuple[ZoneDefinition, ...]
    sport: str = "padel"
    description: str = ""
    coaching_tips: str = ""

    def __post_init__(self):
        zones = tuple(self.zones)
        ids = [z.id for z in zones]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Zone model '{self.id}' has duplicate zone ids: {duplicates}")
        object.__setattr__(self, 'zones', zones)

    def find_zone(self, x: float, y: float) -> Optional[ZoneDefinition]:
        for zone in self.zones:
            if zone.contains(x, y):
                return zone
        return None

    def get(self, zone_id: str) -> Optional[ZoneDefinition]:
        for zone in self.zones:
            if zone.id == zone_id:
                return zone
        return None

    @property
    def zone_ids(self) -> List[str]:
        return [z.id for z in self.zones]

    @property
    def pressure_zone_ids(self) -> List[str]:
        return [z.id for z in self.zones if z.is_pressure_zone]

    def __len__(self) -> int:
        return len(self.zones)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'sport': self.sport,
            'description': self.description,
            'coachingTips': self.coaching_tips,
            'zones': [z.to_dict() for z in self.zones]
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ZoneModel':
        return cls(
            id=str(data['id']),
            name=str(data.get('name', data['id'])),
            zones=tuple(ZoneDefinition.from_dict(z) for z in data.get('zones', [])),
            sport=str(data.get('sport', 'padel')),
            description=str(data.get('description', '')),
            coaching_tips=str(data.get('coachingTips', ''))
        )


# ── Court conventions ─────────────────────────────────────────────────────────
# Tracking reports full-court Y; zone systems describe one half measured from
# the player's own back line. Each convention folds full-court Y onto that half.

@dataclass(frozen=True)
class IdentityConvention:
    """Positions already match the zone coordinate system."""
    sport: str = field(default="generic", init=False)

    def normalize(self, x: float, y: float) -> Tuple[float, float]:
        return x, y


@dataclass(frozen=True)
class TennisConvention:
    """Full tennis court folded at the net onto the near half."""
    net_position: float = TENNIS_NET_POSITION
    full_court_length: float = TENNIS_FULL_COURT
    sport: str = field(default="tennis", init=False)

    def normalize(self, x: float, y: float) -> Tuple[float, float]:
        if y < 0:
            # Behind the baseline counts as the baseline
            return x, 0.0
        if y <= self.net_position:
            return x, y
        return x, max(0.0, self.full_court_length - y)


@dataclass(frozen=True)
class PadelConvention:
    """Full padel court (0-20m) mirrored onto one half (0-10m)."""
    half_court_depth: float = PADEL_HALF_COURT
    sport: str = field(default="padel", init=False)

    def normalize(self, x: float, y: float) -> Tuple[float, float]:
        if y > self.half_court_depth:
            y = 2 * self.half_court_depth - y
        if y < 0:
            y = 0.0
        return x, y


def convention_for_sport(sport: str):
    """Default court convention for a sport."""
    if sport == "tennis":
        return TennisConvention()
    if sport == "padel":
        return PadelConvention()
    return IdentityConvention()


# ── Padel zone systems (half court, y=0 at the back wall) ─────────────────────

def _zone(id, name, x_min, x_max, y_min, y_max, pressure=False,
          description="", advice=""):
    return ZoneDefinition(id, name, x_min, x_max, y_min, y_max,
                          is_pressure_zone=pressure, description=description,
                          tactical_advice=advice)


PADEL_TRAFFIC_LIGHT = ZoneModel(
    id="traffic-light",
    name="Traffic Light",
    sport="padel",
    description="Simple 3-zone system (Green/Orange/Red)",
    coaching_tips="Green (net) is where you finish points. Cross orange (transition) "
                  "quickly. Red (defense) means pressure: lob to reset and work forward.",
    zones=(
        _zone("green", "Net Zone", 0, 10, 7, 10,
              description="Offensive position at the net",
              advice="Finish points here with volleys and smashes"),
        _zone("orange", "Transition Zone", 0, 10, 3.5, 7, pressure=True,
              description="Mid-court transition area",
              advice="Move forward when possible, don't stay here long"),
        _zone("red", "Defense Zone", 0, 10, 0, 3.5, pressure=True,
              description="Back court defensive position",
              advice="Use lobs to reset, look for opportunities to advance"),
    ),
)

PADEL_SIX_ZONE = ZoneModel(
    id="6-zone",
    name="6-Zone Tactical",
    sport="padel",
    description="Split by depth and court side",
    coaching_tips="Control your side while covering the middle; rotate between "
                  "deuce and ad sides while keeping net presence.",
    zones=(
        _zone("net-deuce", "Net Deuce", 0, 5, 7, 10,
              description="Net position on deuce side",
              advice="Control the diagonal, intercept crosses"),
        _zone("net-ad", "Net Ad", 5, 10, 7, 10,
              description="Net position on advantage side",
              advice="Protect the line, attack the middle"),
        _zone("trans-deuce", "Transition Deuce", 0, 5, 3.5, 7, pressure=True,
              description="Mid-court deuce side",
              advice="Move up or back quickly"),
        _zone("trans-ad", "Transition Ad", 5, 10, 3.5, 7, pressure=True,
              description="Mid-court advantage side",
              advice="Avoid lingering in no-man's land"),
        _zone("defense-deuce", "Defense Deuce", 0, 5, 0, 3.5, pressure=True,
              description="Back court deuce corner",
              advice="Use glass walls, lob to reset"),
        _zone("defense-ad", "Defense Ad", 5, 10, 0, 3.5, pressure=True,
              description="Back court advantage corner",
              advice="Recover position, look for counter"),
    ),
)

PADEL_NINE_ZONE = ZoneModel(
    id="9-zone",
    name="9-Zone Grid",
    sport="padel",
    description="Detailed 3x3 grid analysis",
    coaching_tips="Elite players dominate the net center (the 'T') and minimize "
                  "time in mid-court zones.",
    zones=(
        _zone("net-left", "Net Left", 0, 3.33, 6.67, 10,
              description="Net left corner"),
        _zone("net-center", "Net Center", 3.33, 6.67, 6.67, 10,
              description="Net center - the T"),
        _zone("net-right", "Net Right", 6.67, 10, 6.67, 10,
              description="Net right corner"),
        _zone("mid-left", "Mid Left", 0, 3.33, 3.33, 6.67, pressure=True,
              description="Mid left"),
        _zone("mid-center", "Mid Center", 3.33, 6.67, 3.33, 6.67, pressure=True,
              description="Mid center - no-man's land"),
        _zone("mid-right", "Mid Right", 6.67, 10, 3.33, 6.67, pressure=True,
              description="Mid right"),
        _zone("back-left", "Back Left", 0, 3.33, 0, 3.33, pressure=True,
              description="Back left corner"),
        _zone("back-center", "Back Center", 3.33, 6.67, 0, 3.33, pressure=True,
              description="Back center"),
        _zone("back-right", "Back Right", 6.67, 10, 0, 3.33, pressure=True,
              description="Back right corner"),
    ),
)

PADEL_FUNCTIONAL = ZoneModel(
    id="functional",
    name="Functional",
    sport="padel",
    description="Based on shot types and tactics",
    coaching_tips="Volley zone finishes, bandeja zone controls, no-man's land is "
                  "transit only, glass wall zone is survival.",
    zones=(
        _zone("volley", "Volley Zone", 0, 10, 8.5, 10,
              description="Prime finishing area"),
        _zone("bandeja", "Bandeja Zone", 0, 10, 6, 8.5,
              description="Bandeja and vibora territory"),
        _zone("no-mans-land", "No-Man's Land", 0, 10, 4, 6, pressure=True,
              description="Danger zone - transition only"),
        _zone("service-box", "Service Box", 0, 10, 2, 4, pressure=True,
              description="Rally building area"),
        _zone("glass-wall", "Glass Wall Zone", 0, 10, 0, 2, pressure=True,
              description="Defensive survival area"),
    ),
)

# ── Tennis zone systems (half court, y=0 at the baseline) ─────────────────────
# Net zones extend past the net line so approaches that cross it still count.

_TW = TENNIS_COURT_WIDTH
_TMID = TENNIS_COURT_WIDTH / 2
_TNET_REACH = 17.885

TENNIS_TRAFFIC_LIGHT = ZoneModel(
    id="traffic-light",
    name="Traffic Light",
    sport="tennis",
    description="4-zone system (Net/Transition/Baseline/Deep)",
    coaching_tips="Green (net) finishes points, orange (no-man's land) gets you "
                  "passed, blue (baseline) is home, red (deep) means retrieving.",
    zones=(
        _zone("net", "Net Zone", 0, _TW, 8.5, _TNET_REACH,
              description="Attacking position at the net"),
        _zone("transition", "No-Man's Land", 0, _TW, 5.5, 8.5, pressure=True,
              description="Danger zone - pass through quickly!"),
        _zone("baseline", "Baseline Zone", 0, _TW, 2.5, 5.5,
              description="Rally position - your home base"),
        _zone("deep-defense", "Deep Defense", 0, _TW, 0, 2.5, pressure=True,
              description="Behind baseline - defensive position"),
    ),
)

TENNIS_SIX_ZONE = ZoneModel(
    id="6-zone",
    name="6-Zone Tactical",
    sport="tennis",
    description="Split by depth and court side",
    coaching_tips="Recover to center after each shot and minimize time in the "
                  "transition zones.",
    zones=(
        _zone("net-deuce", "Net Deuce", 0, _TMID, 8, _TNET_REACH,
              description="Net position on deuce side"),
        _zone("net-ad", "Net Ad", _TMID, _TW, 8, _TNET_REACH,
              description="Net position on advantage side"),
        _zone("trans-deuce", "Transition Deuce", 0, _TMID, 4, 8, pressure=True,
              description="Mid-court deuce side"),
        _zone("trans-ad", "Transition Ad", _TMID, _TW, 4, 8, pressure=True,
              description="Mid-court advantage side"),
        _zone("baseline-deuce", "Baseline Deuce", 0, _TMID, 0, 4,
              description="Baseline deuce corner"),
        _zone("baseline-ad", "Baseline Ad", _TMID, _TW, 0, 4,
              description="Baseline advantage corner"),
    ),
)

TENNIS_FUNCTIONAL = ZoneModel(
    id="functional",
    name="Functional",
    sport="tennis",
    description="Based on shot types and tactics",
    coaching_tips="Volley zone finishes, approach zone closes, no-man's land gets "
                  "you passed, rally zone builds, defense zone neutralizes.",
    zones=(
        _zone("volley", "Volley Zone", 0, _TW, 9.5, _TNET_REACH,
              description="Prime finishing area"),
        _zone("approach", "Approach Zone", 0, _TW, 6.5, 9.5,
              description="Approach shot territory"),
        _zone("no-mans-land", "No-Man's Land", 0, _TW, 4, 6.5, pressure=True,
              description="Danger zone - vulnerable to passing shots"),
        _zone("rally", "Rally Zone", 0, _TW, 1.5, 4,
              description="Baseline rally position"),
        _zone("defense", "Defense Zone", 0, _TW, 0, 1.5, pressure=True,
              description="Deep defensive position"),
    ),
)

PADEL_ZONE_SYSTEMS: Tuple[ZoneModel, ...] = (
    PADEL_TRAFFIC_LIGHT, PADEL_SIX_ZONE, PADEL_NINE_ZONE, PADEL_FUNCTIONAL
)
TENNIS_ZONE_SYSTEMS: Tuple[ZoneModel, ...] = (
    TENNIS_TRAFFIC_LIGHT, TENNIS_SIX_ZONE, TENNIS_FUNCTIONAL
)


def zone_systems_for_sport(sport: str) -> Sequence[ZoneModel]:
    """Zone systems for a sport; anything other than tennis gets padel."""
    if sport == "tennis":
        return TENNIS_ZONE_SYSTEMS
    return PADEL_ZONE_SYSTEMS


def get_zone_system(sport: str, system_id: str) -> ZoneModel:
    """
    Look up a zone system by id, falling back to the sport's first system.
    """
    systems = zone_systems_for_sport(sport)
    for system in systems:
        if system.id == system_id:
            return system
    logger.warning(f"Unknown zone system '{system_id}' for {sport}; using '{systems[0].id}'")
    return systems[0]
