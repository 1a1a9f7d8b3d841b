# Business Services
from grand_hotel.services.room_service import RoomCatalog
from grand_hotel.services.guest_service import GuestRegistry
from grand_hotel.services.billing_service import PaymentRecorder
from grand_hotel.services.reservation_service import BookingLedger
from grand_hotel.services.hotel_service import HotelService, HotelContext

__all__ = [
    'RoomCatalog', 'GuestRegistry', 'PaymentRecorder',
    'BookingLedger', 'HotelService', 'HotelContext'
]
