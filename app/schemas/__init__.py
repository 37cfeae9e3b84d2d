
from app.schemas.common import ErrorResponse, SeatsUnavailableError, Message
from app.schemas.user import User, UserCreate, AdminCreate, Token, TokenPayload
from app.schemas.show import Show, ShowCreate, AdminShow, ShowSummary
from app.schemas.seat import SeatStatus, SeatRow, SeatMapResponse
from app.schemas.booking import Booking, BookingCreate
