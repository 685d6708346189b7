# Event codes (structured log `event` field and `errorCode` in responses)
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
INVALID_TARGET_URL = 'INVALID_TARGET_URL'
DATA_STORE_ERROR = 'DATA_STORE_ERROR'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
