from .auth import User, SessionToken
from .documents import Document
from .orders import Order
from .residents import Resident
from .communications import Notification, Activity

__all__ = [
    'User', 'SessionToken',
    'Document',
    'Order',
    'Resident',
    'Notification', 'Activity',
]
