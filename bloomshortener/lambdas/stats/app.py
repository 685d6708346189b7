import logging

from bloomshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from bloomshortener.dao.exceptions import DataStoreError
from bloomshortener.lambdas.bootstrap import get_pipeline
from bloomshortener.lambdas.responses import response_200, response_500
from bloomshortener.utils.helpers import guarantee_500_response
from bloomshortener.lambdas.stats.constants import DATA_STORE_ERROR, STATS_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Report short URL totals and resolution pipeline tuning

    The stats pipeline never resolves shortcodes, so its filter is not warmed.

    HTTP responses:
        200: {"totalCount": ..., "filterParameters": {...}, "cacheTtl": ...}
        500: store unreachable

    Example:
        >>> json.loads(lambda_handler({}, None)['body'])['cacheTtl']
        604800
    """
    try:
        stats = get_pipeline('stats', warm=False).stats()
    except DataStoreError as e:
        logger.exception('Failed to count short URLs. Responding with 500.', extra={'event': DATA_STORE_ERROR, 'operation': e.operation})
        return response_500(error_code=DATA_STORE_ERROR)

    logger.info('Reporting stats. Responding with 200.', extra={'event': STATS_SUCCESS, 'totalCount': stats.total_count})
    return response_200(stats.as_dict())
