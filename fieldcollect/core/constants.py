"""
Service-wide constants
"""
SERVICE_NAME = "fieldcollect-backend"
DEFAULT_VERSION = "1.0.0"
