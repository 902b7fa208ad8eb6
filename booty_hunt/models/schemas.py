from sqlalchemy import Index, func
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column
from sqlalchemy.types import JSON, BigInteger, Boolean, DateTime, Float, Integer, LargeBinary, String


class Base(DeclarativeBase):
    pass


class Run(Base):
    __tablename__ = "runs"
    id = Column(String, primary_key=True)
    seed = Column(BigInteger, nullable=False)
    ship_class = Column(String, nullable=False)
    doctrine_id = Column(String, nullable=False)
    score = Column(BigInteger, nullable=False)
    waves = Column(Integer, nullable=False)
    victory = Column(Boolean, nullable=False, default=False)
    ships_destroyed = Column(Integer, nullable=False)
    damage_dealt = Column(BigInteger, nullable=False)
    max_combo = Column(Integer, nullable=False)
    time_played = Column(Float, nullable=False)
    max_heat = Column(Float, nullable=False, default=0.0)
    ghost_tape = Column(LargeBinary, nullable=True)
    player_name = Column(String, nullable=False, default="Anonymous")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    week_key = Column(String, nullable=False)

    __table_args__ = (
        Index("idx_runs_seed", "seed"),
        Index("idx_runs_week", "week_key"),
        Index("idx_runs_score", "score"),
    )


class Regatta(Base):
    __tablename__ = "regattas"
    week_key = Column(String, primary_key=True)
    seed = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class SignalFire(Base):
    __tablename__ = "signal_fires"
    code = Column(String, primary_key=True)
    creator_run = Column(String, nullable=False)
    aid_type = Column(String, nullable=False)
    aid_amount = Column(Integer, nullable=False)
    heat_cost = Column(Float, nullable=False, default=5.0)
    redeemed = Column(Boolean, nullable=False, default=False)
    redeemed_by = Column(String, nullable=True)
    redeemed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    expires_at = Column(DateTime, nullable=False)


class TideOmen(Base):
    __tablename__ = "tide_omens"
    week_key = Column(String, primary_key=True)
    omen_id = Column(String, nullable=False)
    omen_name = Column(String, nullable=False)
    modifiers = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class TideContribution(Base):
    __tablename__ = "tide_contributions"
    id = Column(String, primary_key=True)
    week_key = Column(String, nullable=False)
    metric = Column(String, nullable=False)
    value = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (Index("idx_tide_contrib_week", "week_key"),)
