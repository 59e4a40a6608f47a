"""Constants for Myfox integration.

This module contains all the constants used throughout the integration,
including API endpoints, configuration keys, and vendor sentinels.
"""

DOMAIN = "myfox"

BASE_URL = "https://api.myfox.me"
TOKEN_URL = f"{BASE_URL}/oauth/v2/token"

DEFAULT_POLL_INTERVAL = 60
REQUEST_TIMEOUT = 10.0

ERROR_INVALID_AUTH = "invalid_auth"
ERROR_INVALID_CONFIG = "invalid_config"
ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_TIMEOUT = "timeout_error"
ERROR_API_ERROR = "api_error"
ERROR_UNKNOWN = "unknown_error"

CONF_REFRESH_TOKEN = "refresh_token"
CONF_DEBUG = "debug"
CONF_DEBUG_PAYLOAD = "debug_payload"

# Vendor envelope
STATUS_OK = "OK"

SCENARIO_ON_DEMAND = "onDemand"
SCENARIO_MODEL_LABEL = "Scenario"

SECURITY_ARMED = "armed"
SECURITY_PARTIAL = "partial"
SECURITY_DISARMED = "disarmed"
ALARM_SECURITY_LEVELS = (SECURITY_ARMED, SECURITY_PARTIAL, SECURITY_DISARMED)
