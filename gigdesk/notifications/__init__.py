from gigdesk.notifications.dispatcher import NotificationDispatcher

__all__ = ["NotificationDispatcher"]
