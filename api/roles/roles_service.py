import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.roles.roles_model import UserRole
from api.user.user_model import User
from config.roles_config import EntryContext, default_role_for
from helpers.exceptions import NotAuthenticated, PersistenceFailure
from helpers.event_signals import role_synthesized

logger = logging.getLogger(__name__)


class RoleResolver:
    """
    Maps an identity to exactly one role, creating the role record on first
    resolution when signup never wrote one.
    """

    def __init__(self, db: Session):
        self.db = db

    def peek(self, user_id: int) -> Optional[UserRole]:
        try:
            return self.db.get(UserRole, user_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("role lookup failed for user_id=%s", user_id)
            raise PersistenceFailure()

    def resolve(self, user_id: int, entry_context: EntryContext = EntryContext.standard) -> UserRole:
        """
        Return the role record of `user_id`, synthesizing it when missing.

        Concurrent first-time calls converge on one row: the loser of the
        insert race rereads and returns the winner's record. Any other
        storage failure raises PersistenceFailure so the caller is treated
        as unauthenticated instead of being handed a guessed role.
        """
        existing = self.peek(user_id)
        if existing is not None:
            return existing

        try:
            identity_exists = self.db.query(User.id).filter(User.id == user_id).first() is not None
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("identity lookup failed for user_id=%s", user_id)
            raise PersistenceFailure()
        if not identity_exists:
            raise NotAuthenticated("Unknown identity")

        return self._synthesize(user_id, entry_context)

    def _synthesize(self, user_id: int, entry_context: EntryContext) -> UserRole:
        role = default_role_for(entry_context)
        record = UserRole(user_id=user_id, role=role)
        try:
            self.db.add(record)
            self.db.commit()
        except IntegrityError:
            # someone else healed this identity first
            self.db.rollback()
            winner = self.peek(user_id)
            if winner is None:
                logger.error("role insert conflicted but no row found for user_id=%s", user_id)
                raise PersistenceFailure()
            logger.info("role synthesis race lost for user_id=%s, using %s", user_id, winner.role.value)
            return winner
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("role synthesis failed for user_id=%s", user_id)
            raise PersistenceFailure()

        self.db.refresh(record)
        role_synthesized.send(
            RoleResolver,
            user_id=user_id,
            role=role.value,
            entry_context=entry_context.value,
        )
        return record
