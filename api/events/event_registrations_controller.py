from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from api.events.event_registrations_service import RegistrationLedger
from api.events.event_registrations_schema import (
    RegistrationOut,
    RegistrationResult,
    UnregisterResult,
    AttendeeList,
    MyRegistrationOut,
)
from api.events.events_schema import EventRead
from helpers.exceptions import AlreadyRegistered


class RegistrationController:
    @staticmethod
    def register(event_id: UUID, db: Session, user_id: int) -> RegistrationResult:
        ledger = RegistrationLedger(db)
        try:
            registration = ledger.register(user_id, event_id)
            already = False
        except AlreadyRegistered as exc:
            # idempotent for the caller: hand back the row that already exists
            registration = exc.registration
            already = True
        return RegistrationResult(
            registration=RegistrationOut.model_validate(registration),
            already_registered=already,
            registration_count=ledger.count_for(event_id),
        )

    @staticmethod
    def unregister(event_id: UUID, db: Session, user_id: int) -> UnregisterResult:
        ledger = RegistrationLedger(db)
        removed = ledger.unregister(user_id, event_id)
        return UnregisterResult(removed=removed, registration_count=ledger.count_for(event_id))

    @staticmethod
    def list_attendees(event_id: UUID, db: Session, owner_id: int) -> AttendeeList:
        attendees = RegistrationLedger(db).list_attendees(owner_id, event_id)
        return AttendeeList(event_id=event_id, total=len(attendees), attendees=attendees)

    @staticmethod
    def list_mine(db: Session, user_id: int) -> List[MyRegistrationOut]:
        ledger = RegistrationLedger(db)
        results = []
        for registration, event in ledger.list_for_volunteer(user_id):
            read = EventRead.model_validate(event).model_copy(update={
                "registration_count": ledger.count_for(event.id),
                "is_registered": True,
            })
            results.append(MyRegistrationOut(
                registration=RegistrationOut.model_validate(registration),
                event=read,
            ))
        return results
