from .auth import User, SessionToken
from .staff import Staff
from .members import Member
from .selected_services import SelectedService
from .seats import Seat, ServiceSession
from .reservations import Reservation
from .ledger import LedgerEntry

__all__ = [
    'User', 'SessionToken',
    'Staff',
    'Member',
    'SelectedService',
    'Seat', 'ServiceSession',
    'Reservation',
    'LedgerEntry',
]
