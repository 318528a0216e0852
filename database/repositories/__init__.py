from database.repositories.base import BaseRepository
from database.repositories.user import UserRepository
from database.repositories.freelancer import FreelancerRepository
from database.repositories.project import ProjectRepository
from database.repositories.chat import ChatRepository
from database.repositories.notification import NotificationRepository
from database.repositories.payment import PaymentRepository

__all__ = [
    'BaseRepository',
    'UserRepository',
    'FreelancerRepository',
    'ProjectRepository',
    'ChatRepository',
    'NotificationRepository',
    'PaymentRepository',
]
