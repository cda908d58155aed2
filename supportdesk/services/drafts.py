import logging

from supportdesk.core.bot import DraftReplyBot
from supportdesk.core.errors import PermissionDenied
from supportdesk.models.user import User
from supportdesk.services.messages import MessageThread

logger = logging.getLogger(__name__)


class DraftReplies:
    def __init__(self, thread: MessageThread, bot: DraftReplyBot):
        self.thread = thread
        self.bot = bot

    def draft_for(self, ticket_id: int, agent: User) -> str:
        """Ask the bot for a reply to the latest message the agent did not write.

        Falls back to the ticket description when the agent wrote everything
        in the thread so far.
        """
        if not agent.is_agent:
            raise PermissionDenied("Draft replies are available to agents only")
        ticket = self.thread.tickets.get_ticket(ticket_id)
        messages = self.thread.list_messages(ticket.id, agent)
        source = next(
            (m.content for m in reversed(messages) if m.sender_id != agent.id),
            ticket.description,
        )
        logger.info("Requesting draft reply for ticket %s", ticket.id)
        return self.bot.draft_reply(ticket.id, source)
