from app.models.user import User
from app.models.progress import UserProgress
from app.models.reflection import Reflection

__all__ = ["User", "UserProgress", "Reflection"]
