from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    leader_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
    )

    leader = relationship("User", foreign_keys=[leader_id], post_update=True)

    members = relationship(
        "User",
        back_populates="team",
        foreign_keys="User.team_id",
    )
