"""
Tests for volunteer registrations: idempotence, open-event rules, attendee lists.
"""
from datetime import timedelta
from uuid import uuid4

import pytest

from api.events.events_model import EventStatus
from api.events.event_registrations_model import EventRegistration
from api.events.event_registrations_service import RegistrationLedger
from helpers.event_signals import registration_created, registration_removed
from helpers.exceptions import (
    NotAuthenticated,
    EventNotFound,
    EventNotPublished,
    EventClosed,
    AlreadyRegistered,
    NotOwner,
)
from utils.time_utils import utcnow
from conftest import make_event, make_user
from config.roles_config import Role


class TestRegister:
    def test_register_counts_once(self, db_session, volunteer, published_event):
        ledger = RegistrationLedger(db_session)
        registration = ledger.register(volunteer.id, published_event.id)

        assert registration.user_id == volunteer.id
        assert ledger.count_for(published_event.id) == 1

    def test_duplicate_reports_existing_row(self, db_session, volunteer, published_event):
        ledger = RegistrationLedger(db_session)
        first = ledger.register(volunteer.id, published_event.id)

        with pytest.raises(AlreadyRegistered) as exc_info:
            ledger.register(volunteer.id, published_event.id)

        assert exc_info.value.registration.id == first.id
        assert ledger.count_for(published_event.id) == 1

    def test_anonymous(self, db_session, published_event):
        with pytest.raises(NotAuthenticated):
            RegistrationLedger(db_session).register(None, published_event.id)

    def test_missing_event(self, db_session, volunteer):
        with pytest.raises(EventNotFound):
            RegistrationLedger(db_session).register(volunteer.id, uuid4())

    @pytest.mark.parametrize("status", [EventStatus.draft, EventStatus.cancelled])
    def test_unpublished_event(self, db_session, organizer, volunteer, status):
        event = make_event(db_session, organizer, status=status)
        with pytest.raises(EventNotPublished):
            RegistrationLedger(db_session).register(volunteer.id, event.id)

    def test_started_event(self, db_session, organizer, volunteer):
        event = make_event(db_session, organizer, start_time=utcnow() - timedelta(minutes=5))
        with pytest.raises(EventClosed):
            RegistrationLedger(db_session).register(volunteer.id, event.id)

    def test_no_capacity_ceiling(self, db_session, organizer):
        event = make_event(db_session, organizer, capacity=1)
        ledger = RegistrationLedger(db_session)
        for n in range(3):
            user = make_user(db_session, f"v{n}@uni.edu.au", Role.volunteer)
            ledger.register(user.id, event.id)

        assert ledger.count_for(event.id) == 3

    def test_race_loser_gets_already_registered(self, session_factory, db_session, volunteer, published_event):
        """The unique constraint settles two simultaneous sign-ups."""
        winner_session = session_factory()
        loser_session = session_factory()
        try:
            winner = RegistrationLedger(winner_session).register(volunteer.id, published_event.id)

            # the loser passed its duplicate check before the winner committed
            with pytest.raises(AlreadyRegistered) as exc_info:
                RegistrationLedger(loser_session)._insert(volunteer.id, published_event.id)

            assert exc_info.value.registration.id == winner.id
        finally:
            winner_session.close()
            loser_session.close()

        assert db_session.query(EventRegistration).count() == 1

    def test_signals(self, db_session, volunteer, published_event):
        created, removed = [], []

        def on_created(sender, **kwargs):
            created.append(kwargs)

        def on_removed(sender, **kwargs):
            removed.append(kwargs)

        registration_created.connect(on_created)
        registration_removed.connect(on_removed)
        try:
            ledger = RegistrationLedger(db_session)
            ledger.register(volunteer.id, published_event.id)
            ledger.unregister(volunteer.id, published_event.id)
            ledger.unregister(volunteer.id, published_event.id)
        finally:
            registration_created.disconnect(on_created)
            registration_removed.disconnect(on_removed)

        assert len(created) == 1
        assert len(removed) == 1


class TestUnregister:
    def test_unregister_then_noop(self, db_session, volunteer, published_event):
        ledger = RegistrationLedger(db_session)
        ledger.register(volunteer.id, published_event.id)

        assert ledger.unregister(volunteer.id, published_event.id) is True
        assert ledger.count_for(published_event.id) == 0
        assert ledger.unregister(volunteer.id, published_event.id) is False
        assert ledger.count_for(published_event.id) == 0

    def test_only_own_row(self, db_session, volunteer, second_volunteer, published_event):
        ledger = RegistrationLedger(db_session)
        ledger.register(volunteer.id, published_event.id)

        assert ledger.unregister(second_volunteer.id, published_event.id) is False
        assert ledger.count_for(published_event.id) == 1

    def test_register_again_after_unregister(self, db_session, volunteer, published_event):
        ledger = RegistrationLedger(db_session)
        ledger.register(volunteer.id, published_event.id)
        ledger.unregister(volunteer.id, published_event.id)
        ledger.register(volunteer.id, published_event.id)
        assert ledger.count_for(published_event.id) == 1

    def test_refused_once_started(self, db_session, volunteer, published_event):
        """After the start the registration is part of the attendance record."""
        ledger = RegistrationLedger(db_session)
        ledger.register(volunteer.id, published_event.id)

        with pytest.raises(EventClosed):
            ledger.unregister(
                volunteer.id, published_event.id,
                now=published_event.start_time + timedelta(minutes=1),
            )
        assert ledger.count_for(published_event.id) == 1

    def test_missing_event_is_noop(self, db_session, volunteer):
        assert RegistrationLedger(db_session).unregister(volunteer.id, uuid4()) is False


class TestAttendees:
    def test_owner_sees_registrants_in_order(self, db_session, organizer, volunteer, second_volunteer,
                                             published_event):
        ledger = RegistrationLedger(db_session)
        ledger.register(second_volunteer.id, published_event.id)
        ledger.register(volunteer.id, published_event.id)

        attendees = ledger.list_attendees(organizer.id, published_event.id)

        assert [a.identity_id for a in attendees] == [second_volunteer.id, volunteer.id]
        snapshot = attendees[1].profile_snapshot
        assert snapshot.full_name == "Alice Nguyen"
        assert snapshot.email == "alice@uni.edu.au"
        assert snapshot.phone == "0412345678"
        assert snapshot.university == "UNSW"
        assert attendees[0].registered_at <= attendees[1].registered_at

    def test_non_owner(self, db_session, other_organizer, published_event):
        with pytest.raises(NotOwner):
            RegistrationLedger(db_session).list_attendees(other_organizer.id, published_event.id)

    def test_missing_event(self, db_session, organizer):
        with pytest.raises(EventNotFound):
            RegistrationLedger(db_session).list_attendees(organizer.id, uuid4())

    def test_list_for_volunteer(self, db_session, organizer, volunteer):
        later = make_event(db_session, organizer, title="Later", start_time=utcnow() + timedelta(days=9))
        sooner = make_event(db_session, organizer, title="Sooner", start_time=utcnow() + timedelta(days=1))
        ledger = RegistrationLedger(db_session)
        ledger.register(volunteer.id, later.id)
        ledger.register(volunteer.id, sooner.id)

        rows = ledger.list_for_volunteer(volunteer.id)
        assert [event.title for _, event in rows] == ["Sooner", "Later"]
