
from app.models.user import User
from app.models.show import Show
from app.models.booking import Booking, BookingSeat
