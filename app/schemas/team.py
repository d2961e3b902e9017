from typing import Optional

from pydantic import BaseModel


class TeamOut(BaseModel):
    id: int
    name: str
    leader_id: Optional[int]

    class Config:
        from_attributes = True


class TeamMemberOut(BaseModel):
    id: int
    username: str
    email: str
    role: str
    team_id: Optional[int]

    class Config:
        from_attributes = True
