"""
预订台账测试
覆盖创建、冲突检测、入住/退房/取消状态转换、退款与汇总
"""
import pytest
from datetime import date
from decimal import Decimal

from grand_hotel.exceptions import (
    ValidationError, NotFoundError, ConflictError, StateError, PaymentError
)
from grand_hotel.models.ontology import BookingStatus, PaymentMethod, RoomCategory
from grand_hotel.services.hotel_service import HotelContext
from grand_hotel.services.reservation_service import validate_stay_dates


JUNE_1 = date(2024, 6, 1)
JUNE_4 = date(2024, 6, 4)


class TestValidateStayDates:
    def test_nights(self):
        assert validate_stay_dates(JUNE_1, JUNE_4) == 3

    @pytest.mark.parametrize("check_out", [JUNE_1, date(2024, 5, 31)])
    def test_non_positive_stay(self, check_out):
        with pytest.raises(ValidationError):
            validate_stay_dates(JUNE_1, check_out)


class TestCreateBooking:
    """创建预订测试"""

    def test_create_booking(self, ledger, make_booking):
        """101 房三晚：总价 240.00，已确认，支付成功"""
        booking = make_booking()

        assert booking.booking_id == "BK00001"
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.nights == 3
        assert booking.total_cost == Decimal("240.00")
        assert booking.guest.guest_id == "G0001"
        assert booking.payment.payment_id == "PAY00001"
        assert booking.payment.amount == Decimal("240.00")
        assert booking.payment.successful is True
        assert ledger.get_booking("BK00001") is booking

    def test_new_booking_does_not_occupy_room(self, ledger, make_booking):
        make_booking()
        assert ledger.catalog.find_room("101").available is True

    def test_guest_fields_trimmed(self, ledger):
        booking = ledger.create_booking(
            "  张三  ", " 138 ", " z@example.com ", JUNE_1, JUNE_4, "101", PaymentMethod.CASH
        )
        assert booking.guest.name == "张三"
        assert booking.guest.phone == "138"
        assert booking.guest.email == "z@example.com"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, ledger, make_booking, name):
        with pytest.raises(ValidationError):
            make_booking(name=name)
        assert len(ledger) == 0
        assert len(ledger.guests) == 0

    def test_invalid_dates_rejected(self, ledger, make_booking):
        with pytest.raises(ValidationError):
            make_booking(check_in=JUNE_4, check_out=JUNE_1)
        assert len(ledger) == 0

    def test_unknown_room(self, ledger, make_booking):
        with pytest.raises(NotFoundError):
            make_booking(room_number="999")

    def test_overlapping_booking_rejected(self, ledger, make_booking):
        make_booking()
        with pytest.raises(ConflictError):
            make_booking(check_in=date(2024, 6, 3), check_out=date(2024, 6, 6), name="李四")
        assert len(ledger) == 1
        assert len(ledger.guests) == 1

    def test_same_day_turnover_allowed(self, make_booking):
        make_booking()
        second = make_booking(check_in=JUNE_4, check_out=date(2024, 6, 6), name="李四")
        assert second.booking_id == "BK00002"

    def test_other_room_same_dates(self, make_booking):
        make_booking()
        assert make_booking(room_number="102").room.room_number == "102"

    def test_payment_failure_creates_nothing(self, test_settings):
        context = HotelContext.build(test_settings, processor=lambda p: False)
        context.catalog.seed()

        with pytest.raises(PaymentError):
            context.ledger.create_booking(
                "张三", "", "", JUNE_1, JUNE_4, "101", PaymentMethod.CREDIT_CARD
            )

        assert len(context.ledger) == 0
        assert len(context.guests) == 0
        assert context.ledger.sequence.next_value == 1
        # 支付编号已被消耗
        assert context.payments.sequence.next_value == 2


class TestAvailability:
    """可订查询测试"""

    def test_search_excludes_booked_room(self, ledger, make_booking):
        make_booking()
        rooms = ledger.search_available_rooms(date(2024, 6, 2), date(2024, 6, 3))
        numbers = [a.room.room_number for a in rooms]
        assert "101" not in numbers
        assert len(numbers) == 21

    def test_search_by_category(self, ledger):
        rooms = ledger.search_available_rooms(JUNE_1, JUNE_4, RoomCategory.SUITE)
        assert [a.room.room_number for a in rooms] == ["301", "302", "303", "304"]
        assert all(a.nights == 3 for a in rooms)
        assert rooms[0].nightly_rate == Decimal("300.00")
        assert rooms[0].total_cost == Decimal("900.00")

    def test_cancelled_booking_frees_dates(self, ledger, make_booking):
        booking = make_booking()
        ledger.cancel(booking.booking_id, today=date(2024, 5, 1))
        room = ledger.catalog.find_room("101")
        assert ledger.is_room_available(room, JUNE_1, JUNE_4)

    def test_checked_out_booking_frees_dates(self, ledger, make_booking):
        booking = make_booking()
        ledger.check_in(booking.booking_id)
        ledger.check_out(booking.booking_id)
        assert ledger.is_room_available(ledger.catalog.find_room("101"), JUNE_1, JUNE_4)

    def test_search_invalid_dates(self, ledger):
        with pytest.raises(ValidationError):
            ledger.search_available_rooms(JUNE_4, JUNE_1)

    def test_every_search_result_is_bookable(self, ledger, make_booking):
        """查询返回的房间都能成功预订"""
        make_booking()
        make_booking(room_number="301", check_in=date(2024, 6, 2), check_out=date(2024, 6, 5))
        check_in, check_out = date(2024, 6, 2), date(2024, 6, 3)
        for available in ledger.search_available_rooms(check_in, check_out):
            booking = make_booking(
                room_number=available.room.room_number, check_in=check_in, check_out=check_out
            )
            assert booking.total_cost == available.total_cost

    def test_quote(self, ledger):
        assert ledger.quote("201", JUNE_1, JUNE_4) == Decimal("450.00")


class TestTransitions:
    """状态转换测试"""

    def test_check_in_occupies_room(self, ledger, make_booking):
        booking = make_booking()
        result = ledger.check_in("BK00001")
        assert result is booking
        assert booking.status == BookingStatus.CHECKED_IN
        assert booking.room.available is False

    def test_check_out_returns_total(self, ledger, make_booking):
        booking = make_booking()
        ledger.check_in(booking.booking_id)
        assert ledger.check_out(booking.booking_id) == Decimal("240.00")
        assert booking.status == BookingStatus.CHECKED_OUT
        assert booking.room.available is True

    def test_check_in_twice_rejected(self, ledger, make_booking):
        booking = make_booking()
        ledger.check_in(booking.booking_id)
        with pytest.raises(StateError) as exc_info:
            ledger.check_in(booking.booking_id)
        assert exc_info.value.current_status == BookingStatus.CHECKED_IN
        assert "CHECKED_IN" in exc_info.value.message

    def test_check_out_without_check_in(self, ledger, make_booking):
        booking = make_booking()
        with pytest.raises(StateError):
            ledger.check_out(booking.booking_id)
        assert booking.status == BookingStatus.CONFIRMED

    def test_check_in_cancelled(self, ledger, make_booking):
        booking = make_booking()
        ledger.cancel(booking.booking_id, today=date(2024, 5, 1))
        with pytest.raises(StateError):
            ledger.check_in(booking.booking_id)

    def test_cancel_checked_in_releases_room(self, ledger, make_booking):
        booking = make_booking()
        ledger.check_in(booking.booking_id)
        ledger.cancel(booking.booking_id, today=date(2024, 6, 1))
        assert booking.status == BookingStatus.CANCELLED
        assert booking.room.available is True

    def test_cancel_twice_rejected(self, ledger, make_booking):
        booking = make_booking()
        ledger.cancel(booking.booking_id, today=date(2024, 5, 1))
        with pytest.raises(StateError) as exc_info:
            ledger.cancel(booking.booking_id, today=date(2024, 5, 1))
        assert exc_info.value.current_status == BookingStatus.CANCELLED

    def test_cancel_checked_out_rejected(self, ledger, make_booking):
        booking = make_booking()
        ledger.check_in(booking.booking_id)
        ledger.check_out(booking.booking_id)
        with pytest.raises(StateError):
            ledger.cancel(booking.booking_id)

    def test_unknown_booking(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.check_in("BK99999")
        with pytest.raises(NotFoundError):
            ledger.cancel("BK99999")

    def test_cancelled_booking_stays_in_ledger(self, ledger, make_booking):
        booking = make_booking()
        ledger.cancel(booking.booking_id, today=date(2024, 5, 1))
        assert ledger.get_booking(booking.booking_id) is booking
        assert len(ledger) == 1


class TestRefund:
    """取消退款测试"""

    def test_full_refund_well_ahead(self, ledger, make_booking):
        booking = make_booking()
        assert ledger.cancel(booking.booking_id, today=date(2024, 5, 27)) == Decimal("240.00")

    def test_half_refund_day_before(self, ledger, make_booking):
        booking = make_booking()
        assert ledger.cancel(booking.booking_id, today=date(2024, 5, 31)) == Decimal("120.00")

    def test_half_refund_at_threshold(self, ledger, make_booking):
        """入住日期恰好为今天 + 2 天时只退一半"""
        booking = make_booking()
        assert ledger.compute_refund(booking, today=date(2024, 5, 30)) == Decimal("120.00")
        assert ledger.compute_refund(booking, today=date(2024, 5, 29)) == Decimal("240.00")

    def test_refund_rounded_to_cents(self, ledger, make_booking):
        booking = make_booking(room_number="201", check_in=JUNE_1, check_out=date(2024, 6, 2))
        refund = ledger.compute_refund(booking, today=JUNE_1)
        assert refund == Decimal("75.00")
        assert refund.as_tuple().exponent == -2


class TestSummary:
    def test_summary_counts_and_revenue(self, ledger, make_booking):
        a = make_booking()
        b = make_booking(room_number="201")
        c = make_booking(room_number="301")
        make_booking(room_number="102")
        ledger.check_in(a.booking_id)
        ledger.check_in(b.booking_id)
        ledger.check_out(b.booking_id)
        ledger.cancel(c.booking_id, today=date(2024, 5, 1))

        summary = ledger.summary()
        assert summary.total == 4
        assert summary.confirmed == 1
        assert summary.checked_in == 1
        assert summary.checked_out == 1
        assert summary.cancelled == 1
        # 240 (101) + 450 (201) + 240 (102)，已取消的套房不计入
        assert summary.revenue == Decimal("930.00")

    def test_empty_summary(self, ledger):
        summary = ledger.summary()
        assert summary.total == 0
        assert summary.revenue == Decimal("0.00")


class TestOccupancy:
    """房间占用状态只由已入住的预订决定"""

    def test_cancel_other_booking_keeps_room_occupied(self, ledger, make_booking):
        stay = make_booking()
        later = make_booking(check_in=date(2024, 6, 10), check_out=date(2024, 6, 12), name="李四")
        ledger.check_in(stay.booking_id)

        ledger.cancel(later.booking_id, today=date(2024, 5, 1))

        assert ledger.catalog.find_room("101").available is False

    def test_check_out_with_other_guest_in_room(self, ledger, make_booking):
        first = make_booking()
        second = make_booking(check_in=date(2024, 6, 10), check_out=date(2024, 6, 12), name="李四")
        ledger.check_in(first.booking_id)
        ledger.check_in(second.booking_id)

        ledger.check_out(first.booking_id)
        assert ledger.catalog.find_room("101").available is False

        ledger.check_out(second.booking_id)
        assert ledger.catalog.find_room("101").available is True

    def test_reconcile_occupancy(self, ledger, make_booking):
        booking = make_booking()
        ledger.check_in(booking.booking_id)
        ledger.catalog.find_room("101").available = True
        ledger.catalog.find_room("205").available = False

        ledger.reconcile_occupancy()

        assert ledger.catalog.find_room("101").available is False
        assert ledger.catalog.find_room("205").available is True
