import json
import logging

from bloomshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from bloomshortener.dao.exceptions import DataStoreError
from bloomshortener.exceptions import InvalidURLError
from bloomshortener.lambdas.bootstrap import get_pipeline
from bloomshortener.lambdas.responses import response_200, response_400, response_500
from bloomshortener.utils.helpers import get_short_url, guarantee_500_response
from bloomshortener.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    INVALID_TARGET_URL,
    DATA_STORE_ERROR,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract target URL from request body
    - Step 2: Create the short URL via the resolution pipeline
    - Step 3: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            message: success message
            target_url: normalized target url
            short_url: newly generated short url
            shortcode: newly generated shortcode
        400: Bad client request
            message: invalid JSON, missing or invalid target_url
        500: Internal server error
            message: indicate the server experienced an internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy output format.

    Example:
        >>> event = {'body': '{"target_url": "example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['target_url']
        'http://example.com'
    """
    # 1- Extract target URL from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    raw_url = request_body.get('target_url') if isinstance(request_body, dict) else None
    if not raw_url:
        logger.info("Missing 'target_url' in body. Responding with 400.", extra={'event': MISSING_TARGET_URL})
        return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL)

    # 2- Create the short URL
    pipeline = get_pipeline('shorten_url')
    try:
        created = pipeline.create_short_url(raw_url)
    except InvalidURLError as e:
        logger.info('Invalid target URL. Responding with 400.', extra={'event': INVALID_TARGET_URL, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_TARGET_URL)
    except DataStoreError as e:
        logger.exception(
            'Failed to store short URL. Responding with 500.',
            extra={'event': DATA_STORE_ERROR, 'operation': e.operation, 'shortcode': e.shortcode},
        )
        return response_500(error_code=DATA_STORE_ERROR)

    # 3- Return successful response to user
    shortcode, target_url = created.shortcode, created.target
    short_url = get_short_url(shortcode, event)
    logger.info('Shortened URL. Responding with 200.', extra={'event': SHORTEN_SUCCESS, 'shortcode': shortcode})
    return response_200(
        {
            'message': f'Successfully shortened {target_url} to {short_url}',
            'target_url': target_url,
            'short_url': short_url,
            'shortcode': shortcode,
        }
    )
