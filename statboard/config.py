import logging
import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Statboard configuration settings"""
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///statboard.db')
    
    # Runtime settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()
    
    # Stat kind that orders both the per-player rank and the top list
    RANKING_STAT = os.getenv('RANKING_STAT', 'KILLS')
    
    @classmethod
    def get_ranking_stat(cls):
        """Resolve the configured ranking stat to a StatKind"""
        from statboard.data_models.stat_kind import StatKind
        return StatKind.resolve(cls.RANKING_STAT)
    
    @classmethod
    def get_log_level(cls) -> int:
        """Numeric logging level for LOG_LEVEL"""
        level = logging.getLevelName(cls.LOG_LEVEL)
        if not isinstance(level, int):
            raise ValueError(f"LOG_LEVEL '{cls.LOG_LEVEL}' is not a logging level")
        return level
    
    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        from statboard.utils.stats_exceptions import UnknownStatKind
        
        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL is required")
        try:
            cls.get_ranking_stat()
        except UnknownStatKind:
            raise ValueError(f"RANKING_STAT '{cls.RANKING_STAT}' is not a known stat kind")
        cls.get_log_level()
