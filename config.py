import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as experiences.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "experiences.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bearer session lifetime: 7 days
    SESSION_LIFETIME_SECONDS = int(os.getenv("SESSION_LIFETIME_SECONDS", str(7 * 24 * 60 * 60)))

    # Idle timeout: 0 disables it
    IDLE_TIMEOUT_SECONDS = int(os.getenv("IDLE_TIMEOUT_SECONDS", "0"))

    # Passwords
    PASSWORD_MIN_LEN = int(os.getenv("PASSWORD_MIN_LEN", "8"))
    BCRYPT_ROUNDS = 12

    # Booking limits
    MAX_GUESTS_PER_BOOKING = int(os.getenv("MAX_GUESTS_PER_BOOKING", "20"))

    # Frontend origin allowed by CORS
    ALLOWED_ORIGIN = os.getenv("ALLOWED_ORIGIN", "http://localhost:3000")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False
