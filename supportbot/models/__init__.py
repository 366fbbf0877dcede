from supportbot.models.conversation import Conversation
from supportbot.models.message import Message
from supportbot.models.support_issue import SupportIssue
from supportbot.models.user import User

__all__ = [
    "Conversation",
    "Message",
    "SupportIssue",
    "User",
]
