from app.models.plant import Plant

__all__ = [
    "Plant",
]
