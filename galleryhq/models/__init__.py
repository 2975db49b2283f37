from .user import User
from .message import Message
from .activity import Activity

__all__ = [
    "User",
    "Message",
    "Activity",
]
