from .client import KbcClient

__all__ = [
    'KbcClient',
]
