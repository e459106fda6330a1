import pytest

from src.service.ticketing.domain.ticketing_errors import ReferenceParseError
from src.service.ticketing.domain.value_object.payment_reference import PaymentReference


TS = 1_760_000_000_000


@pytest.mark.unit
class TestPaymentReferenceBuild:
    def test_paid_reference_without_ticket_type(self) -> None:
        reference = PaymentReference.build_paid(event_id=5, user_id=12, timestamp_ms=TS)

        assert str(reference) == f'5-{TS}-12'
        assert reference.is_test is False
        assert reference.is_free is False

    def test_paid_reference_with_ticket_type(self) -> None:
        reference = PaymentReference.build_paid(
            event_id=5, user_id=12, ticket_type_id=3, timestamp_ms=TS
        )

        assert str(reference) == f'5-{TS}-12-3'

    def test_test_reference_carries_marker(self) -> None:
        reference = PaymentReference.build_test(event_id=5, user_id=12, timestamp_ms=TS)

        assert str(reference) == f'5-{TS}-12-test'
        assert reference.is_test is True

    def test_free_reference_has_prefix(self) -> None:
        reference = PaymentReference.build_free(event_id=5, user_id=12, timestamp_ms=TS)

        assert str(reference) == f'free-5-{TS}-12'
        assert reference.is_free is True

    def test_references_for_different_users_differ(self) -> None:
        first = PaymentReference.build_paid(event_id=5, user_id=12, timestamp_ms=TS)
        second = PaymentReference.build_paid(event_id=5, user_id=13, timestamp_ms=TS)

        assert str(first) != str(second)


@pytest.mark.unit
class TestPaymentReferenceParse:
    def test_parse_paid_reference_with_ticket_type(self) -> None:
        parsed = PaymentReference.parse(f'5-{TS}-12-3')

        assert parsed.event_id == 5
        assert parsed.timestamp_ms == TS
        assert parsed.user_id == 12
        assert parsed.ticket_type_id == 3
        assert parsed.is_test is False

    def test_parse_test_reference(self) -> None:
        parsed = PaymentReference.parse(f'8-{TS}-4-2-test')

        assert parsed.event_id == 8
        assert parsed.user_id == 4
        assert parsed.ticket_type_id == 2
        assert parsed.is_test is True

    def test_parse_free_reference_reads_event_after_prefix(self) -> None:
        parsed = PaymentReference.parse(f'free-9-{TS}-4')

        assert parsed.event_id == 9
        assert parsed.user_id == 4
        assert parsed.is_free is True

    def test_parse_reference_with_only_event_segment(self) -> None:
        parsed = PaymentReference.parse('42')

        assert parsed.event_id == 42
        assert parsed.user_id is None
        assert parsed.ticket_type_id is None

    @pytest.mark.parametrize(
        'reference',
        ['', 'abc', 'ref-5-12', 'free-x-12', '\u00b2-1700000000000-7', 'free-\u0663-1700000000000'],
    )
    def test_parse_without_numeric_event_id_raises(self, reference: str) -> None:
        with pytest.raises(ReferenceParseError) as exc_info:
            PaymentReference.parse(reference)

        assert exc_info.value.message == 'Could not determine event ID from payment reference'
        assert exc_info.value.status_code == 400

    def test_parse_ignores_non_ascii_digit_segments(self) -> None:
        parsed = PaymentReference.parse(f'7-{TS}-¹²')

        assert parsed.event_id == 7
        assert parsed.user_id is None
