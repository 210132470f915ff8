"""
Session Store
MongoDB operations for quiz sessions: unique insert, keyed lookup, and
keyed partial update of submission fields
FILE: quizi/db/session_store.py
"""
from typing import Optional
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from quizi.db.mongodb import SESSIONS_COLLECTION, StoreError
from quizi.models.quiz_sessions import QuizSession, SubmissionRecord

logger = logging.getLogger(__name__)


class SessionStore:
    """Persistence for QuizSession documents"""

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Args:
            db: MongoDB database instance
        """
        self.db = db
        self.collection = db[SESSIONS_COLLECTION]

    async def insert_session(self, session: QuizSession) -> None:
        """
        Insert a new session

        Raises:
            StoreError: On duplicate sessionId or any database failure
        """
        try:
            await self.collection.insert_one(session.to_document())
            logger.info(
                f"✅ Stored session {session.sessionId} "
                f"({session.total} questions, expires {session.expiresAt.isoformat()})"
            )
        except DuplicateKeyError as e:
            logger.error(f"❌ Duplicate session id {session.sessionId}")
            raise StoreError(f"Session already exists: {session.sessionId}") from e
        except PyMongoError as e:
            logger.error(f"❌ Failed to insert session {session.sessionId}: {e}")
            raise StoreError(f"Failed to store session: {e}") from e

    async def get_session(self, session_id: str) -> Optional[QuizSession]:
        """
        Retrieve a session by ID

        Returns:
            QuizSession or None if not found

        Raises:
            StoreError: On database failure or an undecodable document
        """
        try:
            doc = await self.collection.find_one({"sessionId": session_id})
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve session {session_id}: {e}")
            raise StoreError(f"Failed to retrieve session: {e}") from e

        if not doc:
            logger.warning(f"⚠️ Session not found: {session_id}")
            return None

        doc.pop("_id", None)
        try:
            return QuizSession(**doc)
        except ValidationError as e:
            logger.error(f"❌ Stored session {session_id} is malformed: {e}")
            raise StoreError(f"Stored session is malformed: {session_id}") from e

    async def record_submission(self, session_id: str, record: SubmissionRecord) -> bool:
        """
        Write all submission fields in a single update keyed by sessionId

        Returns:
            True if the session matched, False if it does not exist

        Raises:
            StoreError: On database failure
        """
        try:
            result = await self.collection.update_one(
                {"sessionId": session_id},
                {"$set": record.model_dump()}
            )
        except PyMongoError as e:
            logger.error(f"❌ Failed to record submission for {session_id}: {e}")
            raise StoreError(f"Failed to record submission: {e}") from e

        if result.matched_count == 0:
            logger.error(f"❌ Session not found on update: {session_id}")
            return False

        logger.info(
            f"✅ Recorded submission for {session_id} - "
            f"score {record.score}/{len(record.perQuestionCorrect)}"
        )
        return True
