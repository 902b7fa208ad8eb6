from datetime import datetime
from typing import Dict, List, Union

from pydantic import BaseModel


class RunSubmissionResultSchema(BaseModel):
    id: str
    rank: int


class LeaderboardEntrySchema(BaseModel):
    id: str
    player_name: str
    score: int
    waves: int
    victory: bool
    ship_class: str
    doctrine_id: str
    ships_destroyed: int
    time_played: float
    max_heat: float
    created_at: datetime

    class Config:
        from_attributes = True


class RegattaSchema(BaseModel):
    week_key: str
    seed: int
    ends_at: datetime
    top_runs: List[LeaderboardEntrySchema]


class SignalFireCreateResultSchema(BaseModel):
    code: str


class SignalFireRedeemResultSchema(BaseModel):
    aid_type: str
    aid_amount: int
    heat_cost: float

    class Config:
        from_attributes = True


class TideOmenSchema(BaseModel):
    week_key: str
    omen_id: str
    omen_name: str
    modifiers: Dict[str, Union[float, str]]

    class Config:
        from_attributes = True


class TideContributeResultSchema(BaseModel):
    accepted: bool
