"""
Statboard-wide constants.

Window arithmetic, leaderboard sizing and the fallbacks used when a stored
row is missing a recoverable field.
"""

class WindowConstants:
    """Constants related to trailing time windows."""
    
    MILLIS_PER_DAY = 24 * 60 * 60 * 1000
    
    # Day count whose window start precedes every storable timestamp.
    # Used as the "all-time" window so both paths share one query shape.
    ALL_TIME = 2 ** 31 - 1

class LeaderboardConstants:
    """Constants for the top list and player rank."""
    
    TOP_LIST_SIZE = 10
    
    # Rank reported when the player has no ranking-stat events in the window
    UNRANKED = -1

class StatConstants:
    """Constants for stat definitions and aggregation."""
    
    FALLBACK_DISPLAY_KEY = "N/A"
    
    # Column widths of the stats / stats_users tables
    STAT_ID_LENGTH = 32
    DISPLAY_KEY_LENGTH = 32
    DESCRIPTION_LENGTH = 64
    PLAYER_ID_LENGTH = 36
