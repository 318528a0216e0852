"""API route handlers."""

from .users import router as users_router
from .freelancers import router as freelancers_router
from .projects import router as projects_router
from .teams import router as teams_router
from .invitations import router as invitations_router
from .chat import router as chat_router
from .notifications import router as notifications_router
