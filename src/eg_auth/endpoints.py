"""Account service endpoints and client constants.

This module contains the URLs, fixed client tokens and protocol constants
shared by the token client, the device code poller and the EULA flow.
"""

# Account service
ACCOUNT_SERVICE = "https://account-public-service-prod.ol.epicgames.com/account/api"

OAUTH_TOKEN_CREATE = f"{ACCOUNT_SERVICE}/oauth/token"
OAUTH_TOKEN_VERIFY = f"{ACCOUNT_SERVICE}/oauth/verify"
OAUTH_TOKEN_KILL_MULTIPLE = f"{ACCOUNT_SERVICE}/oauth/sessions/kill"
OAUTH_EXCHANGE = f"{ACCOUNT_SERVICE}/oauth/exchange"
OAUTH_DEVICE_AUTH = f"{ACCOUNT_SERVICE}/public/account"
OAUTH_DEVICE_CODE = (
    "https://account-public-service-prod03.ol.epicgames.com/account/api/oauth/deviceAuthorization"
)

# EULA tracking and product access
INIT_EULA = (
    "https://eulatracking-public-service-prod-m.ol.epicgames.com"
    "/eulatracking/api/public/agreements/fn"
)
INIT_GRANTACCESS = (
    "https://fortnite-public-service-prod11.ol.epicgames.com/fortnite/api/game/v2/grant_access"
)

# Basic tokens (base64 of "client_id:client_secret")
FORTNITE_IOS = (
    "MzQ0NmNkNzI2OTRjNGE0NDg1ZDgxYjc3YWRiYjIxNDE6OTIwOWQ0YTVlMjVhNDU3ZmI5YjA3NDg5ZDMxM2I0MWE="
)
FORTNITE_SWITCH = (
    "OThmN2U0MmMyZTNhNGY4NmE3NGViNDNmYmI0MWVkMzk6MGEyNDQ5YTItMDAxYS00NTFlLWFmZWMtM2U4MTI5MDFjNGQ3"
)
DEFAULT_BASIC_TOKEN = FORTNITE_IOS

# Token endpoint request constants
TOKEN_TYPE = "eg1"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
KILL_TYPE_OTHERS = "OTHERS_ACCOUNT_CLIENT_SERVICE"

# Error codes
INVALID_TOKEN_ERROR = "errors.com.epicgames.common.oauth.invalid_token"

# Timeouts
DEVICE_CODE_TIMEOUT_SEC = 300
REFRESH_THRESHOLD_MINUTES = 10

# Events
DEVICE_AUTH_CREATED = "deviceauth:created"
DEVICE_CODE_PROMPT = "devicecode:prompt"
