# Event codes (structured log `event` field and `errorCode` in responses)
DATA_STORE_ERROR = 'DATA_STORE_ERROR'
STATS_SUCCESS = 'STATS_SUCCESS'
