import logging

from blinker import signal

logger = logging.getLogger(__name__)

# ------------------------------------------
# Define signals
# ------------------------------------------
role_synthesized     = signal("role_synthesized")
registration_created = signal("registration_created")
registration_removed = signal("registration_removed")
event_deleted        = signal("event_deleted")


# ------------------------------------------
# Listeners (delivery of notifications lives outside this service)
# ------------------------------------------
@role_synthesized.connect
def on_role_synthesized(sender, **kwargs):
    logger.info(
        "role synthesized user_id=%s role=%s entry=%s",
        kwargs.get("user_id"), kwargs.get("role"), kwargs.get("entry_context"),
    )


@registration_created.connect
def on_registration_created(sender, **kwargs):
    logger.info("registration created user_id=%s event_id=%s", kwargs.get("user_id"), kwargs.get("event_id"))


@registration_removed.connect
def on_registration_removed(sender, **kwargs):
    logger.info("registration removed user_id=%s event_id=%s", kwargs.get("user_id"), kwargs.get("event_id"))


@event_deleted.connect
def on_event_deleted(sender, **kwargs):
    logger.info(
        "event deleted event_id=%s registrations_removed=%s",
        kwargs.get("event_id"), kwargs.get("registrations_removed"),
    )
