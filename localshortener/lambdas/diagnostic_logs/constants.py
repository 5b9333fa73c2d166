# Handler event / error codes
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
INVALID_LOG_LEVEL = 'INVALID_LOG_LEVEL'
INVALID_LIMIT = 'INVALID_LIMIT'
SERVICE_UNAVAILABLE = 'SERVICE_UNAVAILABLE'

# Accepted values of the ?level= query parameter
LOG_LEVELS = frozenset({'INFO', 'WARN', 'ERROR', 'DEBUG'})
