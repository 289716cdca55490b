from accounts.models.user import InvalidUserField, User

__all__ = ["InvalidUserField", "User"]
