from .db import db
from .user import User
from .session import Session
from .audit_log import AuditLog
from .experience import Experience, Slot
from .promo_code import PromoCode
from .booking import Booking
