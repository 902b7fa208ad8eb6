from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class LeaderboardCategoryModel(str, Enum):
    global_ = "global"  # no filter
    weekly = "weekly"  # current week key only
    seed = "seed"  # caller supplied seed only


class RunSubmissionModel(BaseModel):
    seed: int = Field(ge=INT64_MIN, le=INT64_MAX)
    ship_class: str
    doctrine_id: str
    score: int = Field(le=INT64_MAX)
    waves: int = Field(ge=INT64_MIN, le=INT64_MAX)
    victory: bool = False
    ships_destroyed: int = Field(ge=INT64_MIN, le=INT64_MAX)
    damage_dealt: int = Field(ge=INT64_MIN, le=INT64_MAX)
    max_combo: int = Field(ge=INT64_MIN, le=INT64_MAX)
    time_played: float
    max_heat: float = 0.0
    ghost_tape: Optional[str] = None  # base64 encoded
    player_name: str = ""


class SignalFireCreateModel(BaseModel):
    creator_run: str
    aid_type: str
    aid_amount: int


class SignalFireRedeemModel(BaseModel):
    code: str
    redeemed_by: Optional[str] = None


class TideContributionModel(BaseModel):
    metric: str
    value: float
