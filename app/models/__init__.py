from app.models.headline import Headline, MODERATION_PENDING

__all__ = [
    'Headline',
    'MODERATION_PENDING',
]
