"""
Links customers and dentists to their identity in the auth service.

The auth service publishes a ``UserCreated`` event once an account exists
for a customer or dentist; the handler stores the new user id on the
matching record. The broker transport is not part of this module: a
consumer decodes the message body and calls ``handle``.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from dental_manager.domain.interfaces import ICustomerRepository, IDentistRepository

logger = logging.getLogger(__name__)

USER_CREATED = "UserCreated"


@dataclass
class UserCreatedData:
    user_id: int
    email: str
    entity_type: str
    entity_id: int
    role: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserCreatedData":
        return cls(
            user_id=int(data["UserId"]),
            email=str(data.get("Email") or ""),
            entity_type=str(data.get("EntityType") or ""),
            entity_id=int(data.get("EntityId") or 0),
            role=str(data.get("Role") or ""),
        )


@dataclass
class UserCreatedEvent:
    """Decoded UserCreated message.

    Wire format::

        {"EventType": "UserCreated", "EventId": "...", "Timestamp": "...",
         "Data": {"UserId": 1, "Email": "...", "EntityType": "Customer",
                  "EntityId": 7}}
    """

    event_id: str
    data: UserCreatedData
    timestamp: Optional[datetime] = None
    event_type: str = USER_CREATED

    @classmethod
    def from_json(cls, payload: Union[str, bytes, Dict[str, Any]]) -> "UserCreatedEvent":
        """Build an event from a message body.

        Raises ValueError when the body is not a UserCreated event.
        """
        body = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
        if not isinstance(body, dict):
            raise ValueError("Event payload must be a JSON object")

        event_type = body.get("EventType") or USER_CREATED
        if event_type != USER_CREATED:
            raise ValueError(f"Unexpected event type: {event_type}")

        data = body.get("Data")
        if not isinstance(data, dict) or "UserId" not in data:
            raise ValueError("Event payload is missing Data.UserId")

        timestamp = body.get("Timestamp")
        return cls(
            event_id=str(body.get("EventId") or ""),
            data=UserCreatedData.from_dict(data),
            timestamp=_parse_timestamp(timestamp) if timestamp else None,
            event_type=event_type,
        )


def _parse_timestamp(value: str) -> Optional[datetime]:
    # Accept the trailing "Z" other services emit
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.warning(
            "Ignoring unparseable event timestamp",
            extra={"context": {"timestamp": value}},
        )
        return None


class UserCreatedEventHandler:
    """Stores the auth-service user id on the matching customer or dentist."""

    def __init__(
        self,
        customer_repo: ICustomerRepository,
        dentist_repo: IDentistRepository,
    ):
        self.repositories = {
            "customer": customer_repo,
            "dentist": dentist_repo,
        }

    def handle(self, event: UserCreatedEvent) -> bool:
        data = event.data
        context = {
            "event_id": event.event_id,
            "user_id": data.user_id,
            "email": data.email,
            "entity_type": data.entity_type,
            "entity_id": data.entity_id,
        }
        logger.info("Processing UserCreated event", extra={"context": context})

        repo = self.repositories.get(data.entity_type.strip().lower())
        if repo is None:
            logger.warning("Unknown entity type", extra={"context": context})
            return False

        try:
            entity = repo.get_by_id(data.entity_id) if data.entity_id > 0 else None
            if entity is None:
                logger.warning(
                    "Entity not found by id, trying email",
                    extra={"context": context},
                )
                entity = repo.get_by_email(data.email)
            if entity is None:
                logger.error("No record matches the event", extra={"context": context})
                return False

            if not repo.update_user_id(entity.id, data.user_id):
                logger.error(
                    "Failed to store user id",
                    extra={"context": {**context, "matched_id": entity.id}},
                )
                return False
        except Exception as e:
            logger.error(
                "Error processing UserCreated event",
                extra={"context": {**context, "error": str(e)}},
                exc_info=True,
            )
            return False

        logger.info(
            "Linked user to entity",
            extra={"context": {**context, "matched_id": entity.id}},
        )
        return True
