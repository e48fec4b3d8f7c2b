import os  # Read settings from the process environment.
from dotenv import load_dotenv  # Load variables from a .env file.

load_dotenv()  # Pull values from .env into process environment.

DATABASE_URL = os.getenv("DATABASE_URL")  # Connection string for the database.
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes", "on")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Branding used on the PDF statistics report.
HOSPITAL_NAME = os.getenv("HOSPITAL_NAME", "HOPE")
HOSPITAL_FOOTER = os.getenv(
    "HOSPITAL_FOOTER",
    "Hospital HOPE • Address: 123 Fake Street, City • Phone: +502 1234-5678",
)
