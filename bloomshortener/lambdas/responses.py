"""API Gateway (Lambda Proxy) response builders shared by the HTTP lambdas"""

import json
from typing import Any


# TODO: remove once the frontend is served from the API's own domain
CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response_200(body: dict[str, Any]) -> dict:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS},
        'body': json.dumps(body),
    }


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    return _error_response(400, 'Bad Request', message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> dict:
    return _error_response(404, 'Not Found', message, error_code)


def response_500(message: str | None = None, error_code: str | None = None) -> dict:
    return _error_response(500, 'Internal Server Error', message, error_code)


def _error_response(status_code: int, base: str, message: str | None, error_code: str | None) -> dict:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': status_code,
        'body': json.dumps(body),
    }
