from dashboard_api.core.db.base import Base, BaseModel

__all__ = ["Base", "BaseModel"]
