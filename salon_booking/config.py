# salon_booking/config.py

import os
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./salon.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Salon timezone: calendar days and "HH:MM" strings are read in this zone
SALON_TIMEZONE = ZoneInfo(os.getenv("SALON_TIMEZONE", "Asia/Tokyo"))

# Reservation defaults, used when a salon has no reservation_config row
DEFAULT_INTERVAL_MINUTES = int(os.getenv("DEFAULT_INTERVAL_MINUTES", "5"))
DEFAULT_AVAILABLE_SHEET = int(os.getenv("DEFAULT_AVAILABLE_SHEET", "3"))
DEFAULT_RESERVATION_LIMIT_DAYS = int(os.getenv("DEFAULT_RESERVATION_LIMIT_DAYS", "60"))
DEFAULT_TODAY_FIRST_LATER_MINUTES = int(os.getenv("DEFAULT_TODAY_FIRST_LATER_MINUTES", "30"))

# Selection limits per reservation
MAX_MENU_LINES = 5
MAX_OPTION_LINES = 5
