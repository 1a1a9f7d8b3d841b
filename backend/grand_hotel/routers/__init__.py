# API Routers
from grand_hotel.routers import rooms, reservations, checkin, checkout

__all__ = ['rooms', 'reservations', 'checkin', 'checkout']
