from .base import Base
from .user import User
from .freelancer import Freelancer
from .project import Project
from .chat import ChatRoom, ChatParticipant, ChatMessage
from .notification import Notification
from .payment import Payment

__all__ = [
    'Base',
    'User',
    'Freelancer',
    'Project',
    'ChatRoom',
    'ChatParticipant',
    'ChatMessage',
    'Notification',
    'Payment',
]
