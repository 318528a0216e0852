from core.invitations.state_machine import (
    TeamSelection,
    choose_team,
    record_response,
    resolve,
    swap_member,
)
from core.invitations.reputation import apply_penalty

__all__ = [
    'TeamSelection',
    'choose_team',
    'record_response',
    'resolve',
    'swap_member',
    'apply_penalty',
]
