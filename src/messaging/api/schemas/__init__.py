from .send_dto import SendMessageRequest

__all__ = ["SendMessageRequest"]
