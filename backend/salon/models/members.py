from __future__ import annotations

from ..extensions import db
from salon.time_utils import to_utc_z
from .mixins import new_id

DEFAULT_STAMP_GOAL = 10


class Member(db.Model):
    """
    Salon customer with a loyalty stamp card.

    STAMPS:
    - +1 per completed session attributed to the member
    - never negative
    - stamps >= goal marks the benefit as available (display only; redeeming
      is an explicit operation)
    """
    __tablename__ = "members"
    __table_args__ = (
        db.CheckConstraint("stamps >= 0", name="ck_members_stamps_non_negative"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(64), nullable=False, index=True)
    phone = db.Column(db.String(32), nullable=False, unique=True, index=True)

    stamps = db.Column(db.Integer, nullable=False, default=0)
    position = db.Column(db.Integer, nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())
    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version_id}

    def is_benefit_eligible(self, stamp_goal: int = DEFAULT_STAMP_GOAL) -> bool:
        return (self.stamps or 0) >= stamp_goal

    def to_dict(self, stamp_goal: int = DEFAULT_STAMP_GOAL) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "stamps": self.stamps,
            "stamp_goal": stamp_goal,
            "benefit_eligible": self.is_benefit_eligible(stamp_goal),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
