"""Configuration module for the Alumni Portal core.

This module provides centralized configuration management, including directory
paths, store settings, bootstrap admin defaults, and application defaults.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory (SQLite store lives here)
DATA_DIR_NAME = os.getenv("DATA_DIR_NAME", "data")
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# Downloaded exports (full export, single-user export)
EXPORT_DIR_NAME = "exports"
EXPORT_DIR = DATA_DIR / EXPORT_DIR_NAME

# --- Store Configuration ---

STORE_DB_NAME: str = os.getenv("STORE_DB_NAME", "alumni_portal.db")
STORE_DB_URL: str = os.getenv("STORE_DB_URL", f"sqlite:///{DATA_DIR}/{STORE_DB_NAME}")

# Storage keys shared by every browsing context of the same origin
USERS_KEY = "alumniUsers"
MESSAGES_KEY = "messages"
CURRENT_USER_KEY = "currentUser"
DARK_MODE_KEY = "darkMode"
INITIAL_ADMIN_KEY = "initialAdmin"
MESSAGE_SEQ_KEY = "messageSeq"
BACKUP_KEY_PREFIX = "alumniBackup_"

# --- Bootstrap Configuration ---

# Seed the demo admin and demo alumni when the user collection is empty
SEED_DEMO_DATA: bool = os.getenv("SEED_DEMO_DATA", "true").lower() == "true"

# Fallback bootstrap admin (dev/demo only). Overridden by the 'initialAdmin'
# store key or an explicit BootstrapAdmin.
DEFAULT_ADMIN_NAME: str = os.getenv("DEFAULT_ADMIN_NAME", "Admin User")
DEFAULT_ADMIN_EMAIL: str = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@alumni.edu")
DEFAULT_ADMIN_PASSWORD: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "putnew")
DEFAULT_ADMIN_DEPARTMENT: str = os.getenv("DEFAULT_ADMIN_DEPARTMENT", "CSE")

# --- Account Configuration ---

MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))

# Password given to alumni created from the admin console
ADMIN_CREATED_PASSWORD: str = os.getenv("ADMIN_CREATED_PASSWORD", "temp123")

# Password given to seeded demo alumni
DEMO_ALUMNI_PASSWORD: str = os.getenv("DEMO_ALUMNI_PASSWORD", "alumni123")

# --- Listing Configuration ---

# Admin alumni table page size
ALUMNI_PAGE_SIZE: int = int(os.getenv("ALUMNI_PAGE_SIZE", "10"))

# Number of cards shown in the dashboard alumni network
NETWORK_PAGE_SIZE: int = int(os.getenv("NETWORK_PAGE_SIZE", "12"))

# Fixed department order used by statistics and filters
DEPARTMENTS: List[str] = ["CSE", "ECE", "EEE", "Mechanical", "Civil", "MBA", "Diploma"]
OTHER_DEPARTMENT = "Other"

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
