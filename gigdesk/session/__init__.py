from gigdesk.session.store import SessionStore

__all__ = ["SessionStore"]
