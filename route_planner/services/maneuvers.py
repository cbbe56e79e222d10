# route_planner/services/maneuvers.py

from typing import Dict, Optional, Protocol


class _ManeuverLike(Protocol):
    type: Optional[str]
    modifier: Optional[str]


DEFAULT_INSTRUCTION = "Продовжуйте"

# Keys are "{type}-{modifier}"; a trailing "-" matches the type alone.
MANEUVER_TRANSLATIONS: Dict[str, str] = {
    "turn-left": "Поверніть ліворуч",
    "turn-right": "Поверніть праворуч",
    "turn-slight left": "Злегка ліворуч",
    "turn-slight right": "Злегка праворуч",
    "turn-sharp left": "Різко ліворуч",
    "turn-sharp right": "Різко праворуч",
    "continue-straight": "Продовжуйте прямо",
    "depart-": "Почніть рух",
    "arrive-": "Прибуття",
    "roundabout-": "Кільце",
    "rotary-": "Кільцевий рух",
}


def format_maneuver(maneuver: Optional[_ManeuverLike]) -> str:
    """
    Turn a (type, modifier) maneuver into a Ukrainian instruction.

    Exact pair first, then the type alone, then the generic text.
    Unknown maneuver types are not an error.
    """
    if maneuver is None:
        return DEFAULT_INSTRUCTION

    maneuver_type = maneuver.type or ""
    modifier = maneuver.modifier or ""

    return (
        MANEUVER_TRANSLATIONS.get(f"{maneuver_type}-{modifier}")
        or MANEUVER_TRANSLATIONS.get(f"{maneuver_type}-")
        or DEFAULT_INSTRUCTION
    )
