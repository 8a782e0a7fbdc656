from sqlalchemy import (
    Column, Integer, String, BigInteger, ForeignKey, Index
)
from sqlalchemy.orm import declarative_base, relationship

from statboard.constants import StatConstants

Base = declarative_base()

class StatDefinition(Base):
    __tablename__ = 'stats'
    
    id = Column(String(StatConstants.STAT_ID_LENGTH), primary_key=True)  # StatKind identifier
    locale_key = Column(String(StatConstants.DISPLAY_KEY_LENGTH), nullable=False)
    description = Column(String(StatConstants.DESCRIPTION_LENGTH), nullable=True)
    
    # Relationships
    events = relationship("PlayerStat", back_populates="definition")
    
    def __repr__(self):
        return f"<StatDefinition(id='{self.id}', locale_key='{self.locale_key}')>"

class PlayerStat(Base):
    """One recorded stat event. Rows are append-only."""
    __tablename__ = 'stats_users'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    player = Column(String(StatConstants.PLAYER_ID_LENGTH), nullable=False)  # UUID string
    stat = Column(String(StatConstants.STAT_ID_LENGTH), ForeignKey('stats.id'), nullable=False)
    value = Column(Integer, nullable=False)
    timestamp = Column(BigInteger, nullable=False)  # epoch milliseconds
    
    # Relationships
    definition = relationship("StatDefinition", back_populates="events")
    
    __table_args__ = (
        Index('idx_stats_users_player_timestamp', 'player', 'timestamp'),
        Index('idx_stats_users_stat', 'stat'),
        Index('idx_stats_users_value', 'value'),
    )
    
    def __repr__(self):
        return f"<PlayerStat(player='{self.player}', stat='{self.stat}', value={self.value}, timestamp={self.timestamp})>"
