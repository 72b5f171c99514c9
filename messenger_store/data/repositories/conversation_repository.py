"""
Conversation Data Access Layer

Every conversation is stored three times over: the shared message log under
``{conversation_id}/messages`` and one summary per participant under
``{user_key}/conversations``. All writes here touch the three records inside a
single transaction, so a summary never points at a message missing from the log.
"""
from typing import Any, AsyncIterator, Dict, List, Optional

from messenger_store.data.codec import (
    decode_messages,
    decode_summaries,
    encode_message,
    encode_summary,
    message_content,
)
from messenger_store.data.models import ConversationSummary, CurrentUser, LatestMessage, Message
from messenger_store.data.repositories.base import BaseRepository
from messenger_store.data.stores.base import Transaction
from messenger_store.utils.exceptions import ConversationNotFoundError, UserNotFoundError
from messenger_store.utils.id_generator import conversation_id_for
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)


def summaries_path(user_key: str) -> str:
    return f"{user_key}/conversations"


def messages_path(conversation_id: str) -> str:
    return f"{conversation_id}/messages"


class ConversationRepository(BaseRepository):
    """Conversation Data Access Class"""

    async def _upsert_summary(self, txn: Transaction, user_key: str, summary: ConversationSummary,
                              latest_only: bool = False):
        """Write ``summary`` into a user's list, matching on conversation id.

        With ``latest_only`` an existing entry keeps its counterpart and name and
        only its latest message changes. A missing entry is always added whole.
        """
        path = summaries_path(user_key)
        records = await txn.get(path)
        if not isinstance(records, list):
            records = []

        encoded = encode_summary(summary)
        for index, record in enumerate(records):
            if isinstance(record, dict) and record.get("id") == summary.id:
                if latest_only:
                    record["latest_message"] = encoded["latest_message"]
                else:
                    records[index] = encoded
                break
        else:
            if latest_only:
                logger.info("Restoring missing conversation summary", user_key=user_key, conversation_id=summary.id)
            records.append(encoded)

        await txn.set(path, records)

    async def create_conversation(self, current_user: CurrentUser, other_user_key: str,
                                  display_name: str, first_message: Message) -> str:
        """Create a conversation opened by ``first_message``; returns its id"""
        conversation_id = conversation_id_for(first_message.id)
        sender_key = current_user.key
        record = encode_message(first_message)
        latest = LatestMessage(date=first_message.sent_at, text=record["content"], is_read=False)

        async def work(txn: Transaction) -> str:
            user_node = await txn.get(sender_key)
            if not isinstance(user_node, dict):
                raise UserNotFoundError(sender_key)

            await self._upsert_summary(txn, sender_key, ConversationSummary(
                id=conversation_id,
                other_user_key=other_user_key,
                name=display_name,
                latest_message=latest
            ))
            await self._upsert_summary(txn, other_user_key, ConversationSummary(
                id=conversation_id,
                other_user_key=sender_key,
                name=current_user.name,
                latest_message=latest
            ))

            log = await txn.get(messages_path(conversation_id))
            if isinstance(log, list):
                logger.warning("Conversation log already exists", conversation_id=conversation_id)
            else:
                await txn.set(messages_path(conversation_id), [record])
            return conversation_id

        await self._run_transaction(
            "create_conversation", work,
            lock_keys=(conversation_id, sender_key, other_user_key)
        )
        logger.info("Conversation created", conversation_id=conversation_id,
                    sender=sender_key, recipient=other_user_key)
        return conversation_id

    async def append_message(self, conversation_id: str, current_user: CurrentUser, other_user_key: str,
                             display_name: str, message: Message):
        """Append to the log and refresh both participants' latest message"""
        sender_key = current_user.key
        record = encode_message(message)
        latest = LatestMessage(date=message.sent_at, text=message_content(message), is_read=False)

        async def work(txn: Transaction):
            log = await txn.get(messages_path(conversation_id))
            if not isinstance(log, list):
                raise ConversationNotFoundError(conversation_id)

            # A retried append whose first attempt landed must not duplicate the record
            if any(isinstance(item, dict) and item.get("id") == message.id for item in log):
                logger.info("Message already in log", conversation_id=conversation_id, message_id=message.id)
            else:
                log.append(record)
                await txn.set(messages_path(conversation_id), log)

            await self._upsert_summary(txn, sender_key, ConversationSummary(
                id=conversation_id,
                other_user_key=other_user_key,
                name=display_name,
                latest_message=latest
            ), latest_only=True)
            await self._upsert_summary(txn, other_user_key, ConversationSummary(
                id=conversation_id,
                other_user_key=sender_key,
                name=current_user.name,
                latest_message=latest
            ), latest_only=True)

        await self._run_transaction(
            "append_message", work,
            lock_keys=(conversation_id, sender_key, other_user_key)
        )
        logger.debug("Message appended", conversation_id=conversation_id, message_id=message.id,
                     kind=message.kind.value)

    async def find_conversation_id(self, sender_key: str, recipient_key: str) -> Optional[str]:
        """Id of the conversation the recipient has with the sender, if any"""
        records = await self._read("find_conversation_id", summaries_path(recipient_key))
        if not isinstance(records, list):
            return None

        for record in records:
            if not isinstance(record, dict) or record.get("other_user_email") != sender_key:
                continue
            conversation_id = record.get("id")
            if isinstance(conversation_id, str):
                return conversation_id
        return None

    async def get_conversations(self, user_key: str) -> List[ConversationSummary]:
        """Current summaries for a user"""
        records = await self._read("get_conversations", summaries_path(user_key))
        return decode_summaries(records if isinstance(records, list) else [], user_key)

    async def get_messages(self, conversation_id: str) -> List[Message]:
        """Current log for a conversation, oldest first"""
        records = await self._read("get_messages", messages_path(conversation_id))
        return decode_messages(records if isinstance(records, list) else [], conversation_id)

    async def conversation_exists(self, conversation_id: str) -> bool:
        records = await self._read("conversation_exists", messages_path(conversation_id))
        return isinstance(records, list)

    async def list_conversations(self, user_key: str) -> AsyncIterator[List[ConversationSummary]]:
        """Live summaries; a new list is yielded after every change"""
        stream = self.store.watch(summaries_path(user_key))
        try:
            async for records in stream:
                yield decode_summaries(records if isinstance(records, list) else [], user_key)
        finally:
            await stream.aclose()

    async def list_messages(self, conversation_id: str) -> AsyncIterator[List[Message]]:
        """Live message log; a new list is yielded after every change"""
        stream = self.store.watch(messages_path(conversation_id))
        try:
            async for records in stream:
                yield decode_messages(records if isinstance(records, list) else [], conversation_id)
        finally:
            await stream.aclose()

    async def delete_conversation(self, user_key: str, conversation_id: str) -> bool:
        """Remove the user's own summary; the counterpart and the log are kept"""

        async def work(txn: Transaction) -> bool:
            path = summaries_path(user_key)
            records = await txn.get(path)
            if not isinstance(records, list):
                return False
            remaining = [
                record for record in records
                if not (isinstance(record, dict) and record.get("id") == conversation_id)
            ]
            if len(remaining) == len(records):
                return False
            await txn.set(path, remaining)
            return True

        removed = await self._run_transaction("delete_conversation", work, lock_keys=(user_key,))
        if removed:
            logger.info("Conversation deleted", user_key=user_key, conversation_id=conversation_id)
        else:
            logger.info("No conversation to delete", user_key=user_key, conversation_id=conversation_id)
        return True
