"""Business logic services."""

from .freelancer_service import FreelancerDirectoryService
from .project_service import ProjectService
from .team_service import TeamServiceWrapper
from .chat_service import ChatService
from .notification_service import NotificationServiceWrapper
