from .health import health_bp
from .auth import auth_bp
from .experiences import experiences_bp
from .promo import promo_bp
from .booking import booking_bp
