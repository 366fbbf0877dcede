from supportbot.services.conversation_service import ConversationService
from supportbot.services.message_service import MessageService
from supportbot.services.support_issue_service import SupportIssueService
from supportbot.services.user_service import UserService

__all__ = [
    "ConversationService",
    "MessageService",
    "SupportIssueService",
    "UserService",
]
