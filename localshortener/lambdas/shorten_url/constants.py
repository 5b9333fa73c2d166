# Handler event / error codes
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_URL = 'MISSING_URL'
TOO_MANY_URLS = 'TOO_MANY_URLS'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
SHORTEN_FAILED = 'SHORTEN_FAILED'
SERVICE_UNAVAILABLE = 'SERVICE_UNAVAILABLE'
