# Handler event / error codes
INVALID_STATUS_FILTER = 'INVALID_STATUS_FILTER'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
STATS_SUCCESS = 'STATS_SUCCESS'
SERVICE_UNAVAILABLE = 'SERVICE_UNAVAILABLE'

# Accepted values of the ?status= query parameter
STATUS_FILTERS = frozenset({'active', 'expired'})
