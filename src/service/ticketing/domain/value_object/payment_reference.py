"""
Payment reference - the correlation key shared with the payment gateway

Persisted formats (must stay parseable forever):
    paid:  "<eventId>-<unixMillis>-<userId>[-<ticketTypeId>]"
    test:  "<eventId>-<unixMillis>-<userId>[-<ticketTypeId>]-test"
    free:  "free-<eventId>-<unixMillis>-<userId>"
"""

import time
from typing import Optional, Self

import attrs

from src.service.ticketing.domain.ticketing_errors import ReferenceParseError


FREE_PREFIX = 'free-'
TEST_MARKER = '-test'
SEPARATOR = '-'


def _now_millis() -> int:
    return int(time.time() * 1000)


def _as_int(segment: str) -> Optional[int]:
    # ASCII digits only; str.isdigit alone also accepts superscripts like "²"
    return int(segment) if segment.isascii() and segment.isdigit() else None


@attrs.define(frozen=True)
class PaymentReference:
    value: str
    event_id: int
    timestamp_ms: Optional[int] = None
    user_id: Optional[int] = None
    ticket_type_id: Optional[int] = None
    is_free: bool = False
    is_test: bool = False

    def __str__(self) -> str:
        return self.value

    @classmethod
    def build_paid(
        cls,
        *,
        event_id: int,
        user_id: int,
        ticket_type_id: Optional[int] = None,
        timestamp_ms: Optional[int] = None,
    ) -> Self:
        ts = timestamp_ms if timestamp_ms is not None else _now_millis()
        segments = [str(event_id), str(ts), str(user_id)]
        if ticket_type_id is not None:
            segments.append(str(ticket_type_id))
        return cls(
            value=SEPARATOR.join(segments),
            event_id=event_id,
            timestamp_ms=ts,
            user_id=user_id,
            ticket_type_id=ticket_type_id,
        )

    @classmethod
    def build_test(
        cls,
        *,
        event_id: int,
        user_id: int,
        ticket_type_id: Optional[int] = None,
        timestamp_ms: Optional[int] = None,
    ) -> Self:
        paid = cls.build_paid(
            event_id=event_id,
            user_id=user_id,
            ticket_type_id=ticket_type_id,
            timestamp_ms=timestamp_ms,
        )
        return attrs.evolve(paid, value=f'{paid.value}{TEST_MARKER}', is_test=True)

    @classmethod
    def build_free(
        cls, *, event_id: int, user_id: int, timestamp_ms: Optional[int] = None
    ) -> Self:
        ts = timestamp_ms if timestamp_ms is not None else _now_millis()
        return cls(
            value=f'{FREE_PREFIX}{event_id}{SEPARATOR}{ts}{SEPARATOR}{user_id}',
            event_id=event_id,
            timestamp_ms=ts,
            user_id=user_id,
            is_free=True,
        )

    @classmethod
    def parse(cls, reference: str) -> Self:
        """
        Parse a stored reference.

        The event id is the first numeric segment: segment 0 for paid/test
        references, the segment after the literal ``free-`` prefix otherwise.

        Raises:
            ReferenceParseError: When no numeric event id segment is present
        """
        if not reference:
            raise ReferenceParseError(reference)

        is_free = reference.startswith(FREE_PREFIX)
        is_test = TEST_MARKER in reference
        body = reference[len(FREE_PREFIX) :] if is_free else reference
        if is_test and body.endswith(TEST_MARKER):
            body = body[: -len(TEST_MARKER)]

        parts = body.split(SEPARATOR)
        event_id = _as_int(parts[0])
        if event_id is None:
            raise ReferenceParseError(reference)

        return cls(
            value=reference,
            event_id=event_id,
            timestamp_ms=_as_int(parts[1]) if len(parts) > 1 else None,
            user_id=_as_int(parts[2]) if len(parts) > 2 else None,
            ticket_type_id=_as_int(parts[3]) if len(parts) > 3 else None,
            is_free=is_free,
            is_test=is_test,
        )
