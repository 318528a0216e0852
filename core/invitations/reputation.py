"""Rating penalty applied to a freelancer who declines while the teammate accepts."""

from core.config_loader import InvitationConfig

_DEFAULT = InvitationConfig()


def apply_penalty(rating: float, penalty: float = _DEFAULT.rejection_penalty, floor: float = _DEFAULT.rating_floor) -> float:
    return max(floor, round(rating - penalty, 2))
