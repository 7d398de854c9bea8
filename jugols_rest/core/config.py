"""All tunable constants for the Jugol's Rest simulation.

Every magic number in the codebase must reference this file.
"""

# =============================================================================
# METERS
# =============================================================================
MAX_METER: int = 100
MIN_METER: int = 0

# =============================================================================
# TIME
# =============================================================================
DAY_ACTIONS: int = 5
BURST_INTERVAL: int = 3           # every Nth day is a burst day
CAPACITY_BURST_EVERY: int = 2     # every Nth burst raises pack cap and supplies

# =============================================================================
# POPULATION / HOUSING
# =============================================================================
STARTING_HOUSED_POP: int = 6
STARTING_HOUSING_CAPACITY: int = 10
VICTORY_POPULATION: int = 60

BASE_ARRIVALS: int = 2            # regular arrivals per day
ARRIVALS_GROWTH_DAYS: int = 5     # +1 regular arrival every N days
IMMIGRATION_BURST: int = 6        # extra arrivals scheduled for a burst day
FORECAST_FACTION_SEED: int = 7    # picks the camp faction of tomorrow's regular group

# =============================================================================
# CAMP FEEDBACK (per day-start, scaled by camp population)
# =============================================================================
CAMP_PRESSURE_BASE: float = 4.0
CAMP_PRESSURE_PER_CAMPER: float = 1.5
CAMP_TENSION_BASE: float = 2.0
CAMP_TENSION_PER_CAMPER: float = 0.5
CAMP_OVERGROWTH_BASE: float = 1.0
CAMP_OVERGROWTH_PER_CAMPER: float = 0.4
CAMP_PRESSURE_DECAY: int = 10     # when the camp is empty

STABILIZE_SCRAPS_COST: int = 2
STABILIZE_PRESSURE_RELIEF: int = 20

# =============================================================================
# TENSION / THREAT
# =============================================================================
UNGUARDED_ROUTE_TENSION: int = 5
THREAT_OVERGROWTH_THRESHOLD: int = 60
THREAT_VIRTUAL_THRESHOLD: int = 50

# =============================================================================
# COLLAPSE
# =============================================================================
COLLAPSE_TRIGGERS_REQUIRED: int = 2
COLLAPSE_DAYS_FOR_GAME_OVER: int = 2
COLLAPSE_THREAT_NIGHTS: int = 2

# =============================================================================
# PACK
# =============================================================================
PACK_BASE_STAMINA: int = 3
PACK_BASE_POWER: int = 1
HUNGER_REDUCTION_PER_FOOD: int = 15
STARTING_PACK_SIZE_CAP: int = 3
MAX_PACK_SIZE_CAP: int = 5
STARTING_SUPPLIES_TIER: int = 1
DRAFT_CANDIDATES: int = 3

SCRAPS_STAMINA_BY_ROLE: dict[str, int] = {
    "Scout": 2,
    "Bruiser": 1,
    "Warden": 1,
}

FATTY_POWER_BY_ROLE: dict[str, int] = {
    "Scout": 0,
    "Bruiser": 2,
    "Warden": 1,
}

# =============================================================================
# NIGHT ACTIONS
# =============================================================================
OVERGROWTH_BASE_COST: int = 2
ROUTE_BASE_COST: int = 2
RUCKUS_BASE_COST: int = 3
LOT_BASE_COST: int = 2
SHRINE_BASE_COST: int = 1
MIN_ACTION_COST: int = 1

OVERGROWTH_CLEAR_BASE: int = 10
OVERGROWTH_CLEAR_PER_SEVERITY: int = 5
WARDEN_OVERGROWTH_BONUS: int = 5
OVERGROWTH_HOUSING_REWARD: int = 1

RUCKUS_POWER_REQUIRED: int = 2
RUCKUS_POWER_REQUIRED_BRUISER: int = 1
RUCKUS_TENSION_BASE: int = 10
RUCKUS_TENSION_PER_SEVERITY: int = 5

LOT_HOUSING_REWARD: int = 2
LOT_CAMP_RELIEF: int = 10

# =============================================================================
# POI SPAWNING
# =============================================================================
MAX_SEVERITY: int = 3

POI_RADIUS: dict[str, int] = {
    "OVERGROWTH": 70,
    "ROUTE": 80,
    "RUCKUS": 75,
    "LOT": 80,
    "SHRINE": 60,
}

OVERGROWTH_SEED_MULTIPLIER: int = 31
ROUTE_SEED_MULTIPLIER: int = 17
RUCKUS_SEED_MULTIPLIER: int = 13
LOT_SEED_MULTIPLIER: int = 11
SHRINE_SEED_MULTIPLIER: int = 23
SHRINE_DISTRICT_SEED_STEP: int = 7

RUCKUS_TENSION_TRIGGER: int = 60
RUCKUS_TENSION_SURGE: int = 80
ROUTE_TENSION_SEVERITY: int = 60

RECENT_GOD_MEMORY: int = 3
CONTACT_STRAINED_TENSION: int = 60  # contacts switch to their strained voice

# =============================================================================
# FACTIONS
# =============================================================================
VISIBILITY_DORMANT_THRESHOLD: int = 40
VISIBILITY_ACTIVE_THRESHOLD: int = 65

# =============================================================================
# LOGS
# =============================================================================
EVENT_LOG_LIMIT: int = 25
NARRATIVE_LOG_LIMIT: int = 25

# =============================================================================
# NARRATIVE
# =============================================================================
AMBIENT_LINE_CHANCE: float = 0.6

# =============================================================================
# SAVES
# =============================================================================
SAVE_VERSION: int = 2
DEFAULT_SAVE_FILE: str = "saves/jugols-rest-save.json"

# =============================================================================
# DASHBOARD
# =============================================================================
DASHBOARD_UPDATE_INTERVAL: int = 1  # update every N simulated days
