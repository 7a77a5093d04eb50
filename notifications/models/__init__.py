from .notification import Notification, Severity

__all__ = ["Notification", "Severity"]
