"""
Game balance constants.
"""

# Starting statistics
STARTING_STATS = {
    "gold": 50,
    "satisfaction": 60,
    "health": 60,
    "fire_risk": 20,
    "farmers": 20,
    "land_forces": 5,
    "authority": 20,
}

# Stat domains
PERCENT_MIN = 0
PERCENT_MAX = 100
AUTHORITY_MIN = 0.0
AUTHORITY_MAX = 999.999
GOLD_FLOOR = -50  # bankruptcy floor

# Crisis thresholds
CRISIS_FIRE_RISK_ABOVE = 70
CRISIS_HEALTH_BELOW = 30
CRISIS_SATISFACTION_BELOW = 30

# Needs
DECLINE_COOLDOWN_TICKS = 5

# Baseline economy
TAX_PERCENT = 10  # of farmers, scaled by (satisfaction - offset) / 100
TAX_SATISFACTION_OFFSET = 10
GROWTH_HEALTH_OFFSET = 25
GROWTH_HEALTH_DIVISOR = 20

# Modifier chances
FIREWOOD_HALVE_CHANCE = 0.25
WELL_BONUS_CHANCE = 0.5
WELL_BONUS_HEALTH = 1
BREAD_BONUS_CHANCE = 0.10
BREAD_BONUS_FARMERS = 1

# Combat
COMBAT_DIE_SIDES = 6

# Authority
DEFAULT_BOOST_STEPS = 3

BANKRUPTCY_REASON = "Bankruptcy! Your gold has reached -50 or below."

# Log entry sources
SOURCE_DECISION = "Request Decision"
SOURCE_TAX = "Tax Income"
SOURCE_GROWTH = "Population Growth"
SOURCE_COMBAT_COMMIT = "Combat Commit"
SOURCE_COMBAT_OUTCOME = "Combat Outcome"
SOURCE_AUTHORITY_CHECK = "Authority Check"
