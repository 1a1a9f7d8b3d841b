# Ontology Models
from grand_hotel.models.ontology import (
    RoomCategory, CategoryInfo, ROOM_CATEGORY_INFO,
    BookingStatus, PaymentMethod, ACTIVE_BOOKING_STATUSES,
    Room, Guest, Payment, Booking
)

__all__ = [
    'RoomCategory', 'CategoryInfo', 'ROOM_CATEGORY_INFO',
    'BookingStatus', 'PaymentMethod', 'ACTIVE_BOOKING_STATUSES',
    'Room', 'Guest', 'Payment', 'Booking'
]
