from __future__ import annotations

from ..extensions import db


HAIR_LENGTHS = ("short", "medium", "long")


class SelectedService(db.Model):
    """
    One chosen service line with its price frozen at selection time.

    Each row belongs to exactly one owner: an active seat session, a
    reservation, or a ledger entry. Lines are copied (never shared) when a
    session becomes a ledger entry.
    """
    __tablename__ = "selected_services"
    __table_args__ = (
        db.CheckConstraint(
            "(CASE WHEN session_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN reservation_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN ledger_entry_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_selected_services_single_owner",
        ),
        db.CheckConstraint("price >= 0", name="ck_selected_services_price_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    session_id = db.Column(db.String(36), db.ForeignKey("service_sessions.id", ondelete="CASCADE"), nullable=True, index=True)
    reservation_id = db.Column(db.String(36), db.ForeignKey("reservations.id", ondelete="CASCADE"), nullable=True, index=True)
    ledger_entry_id = db.Column(db.String(36), db.ForeignKey("ledger_entries.id"), nullable=True, index=True)

    name = db.Column(db.String(128), nullable=False)
    length = db.Column(db.String(16), nullable=True)  # short, medium, long
    price = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "length": self.length,
            "price": self.price,
        }

    def copy_values(self) -> dict:
        return {"name": self.name, "length": self.length, "price": self.price}
