# Handler event / error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
SHORT_URL_EXPIRED = 'SHORT_URL_EXPIRED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
SERVICE_UNAVAILABLE = 'SERVICE_UNAVAILABLE'
