import json
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from bloomshortener.types import LambdaEvent, LambdaContext
from bloomshortener.lambdas.redirect_url import app
from bloomshortener.pipeline import ResolutionPipeline


def make_event(path_parameters: dict | None) -> LambdaEvent:
    return cast(
        LambdaEvent,
        {
            'resource': '/{shortcode}',
            'pathParameters': path_parameters,
            'httpMethod': 'GET',
            'path': '/abc123',
            'requestContext': {'resourcePath': '/{shortcode}', 'httpMethod': 'GET', 'domainName': 'testhost:1000', 'stage': 'test'},
        },
    )


@pytest.fixture
def successful_event_302() -> LambdaEvent:
    return make_event({'shortcode': 'abc123'})


class TestRedirectUrlHandler:

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'redirect_url'})

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, context: LambdaContext, store, cache, bloom_filter) -> None:
        store.rows['abc123'] = 'https://example.com/blog/chuck-norris-is-awesome'
        pipeline = ResolutionPipeline(store=store, cache=cache, bloom_filter=bloom_filter)
        pipeline.warm()

        # Patch Lambda dependencies
        self.get_pipeline = MagicMock(return_value=pipeline)
        monkeypatch.setattr(app, 'get_pipeline', self.get_pipeline)

        self.context = context
        self.store = store
        self.cache = cache

    def test_lambda_handler(self, successful_event_302: LambdaEvent) -> None:
        response = app.lambda_handler(successful_event_302, self.context)
        headers = response['headers']
        body = json.loads(response['body'])

        # Assert Lambda successfully redirects user to target URL
        assert response['statusCode'] == 302
        assert body == {}
        assert headers['Location'] == 'https://example.com/blog/chuck-norris-is-awesome'
        self.get_pipeline.assert_called_once_with('redirect_url')

    def test_lambda_handler_serves_repeat_requests_from_cache(self, successful_event_302: LambdaEvent) -> None:
        app.lambda_handler(successful_event_302, self.context)
        response = app.lambda_handler(successful_event_302, self.context)

        assert response['statusCode'] == 302
        assert self.store.calls['get'] == 1
        assert self.cache.entries['abc123'] == 'https://example.com/blog/chuck-norris-is-awesome'

    @pytest.mark.parametrize('path_parameters', [None, {}, {'invalid': 'path'}])
    def test_lambda_handler_with_invalid_path_parameters(self, path_parameters) -> None:
        response = app.lambda_handler(make_event(path_parameters), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body['message'] == "Bad Request (missing 'shortcode' in path)"
        assert body['errorCode'] == 'MISSING_SHORTCODE'

    @pytest.mark.parametrize('shortcode', ['ZZZZZZ', 'abc', 'abc-12'])
    def test_lambda_handler_with_unknown_shortcode(self, shortcode: str) -> None:
        response = app.lambda_handler(make_event({'shortcode': shortcode}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 404
        assert body['message'] == f"Not Found (short url https://testhost:1000/{shortcode} doesn't exist)"
        assert body['errorCode'] == 'SHORT_URL_NOT_FOUND'
        assert self.store.calls['get'] == 0

    def test_lambda_handler_with_store_failure(self, successful_event_302: LambdaEvent, store_failure) -> None:
        self.store.fail_with = store_failure

        response = app.lambda_handler(successful_event_302, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body == {'message': 'Internal Server Error', 'errorCode': 'DATA_STORE_ERROR'}

    def test_lambda_handler_with_invalid_configuration(self, monkeypatch: MonkeyPatch, successful_event_302: LambdaEvent) -> None:
        monkeypatch.setattr(app, 'get_pipeline', MagicMock(side_effect=FileNotFoundError('Something goes wrong')))

        response = app.lambda_handler(successful_event_302, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['message'] == 'Internal Server Error'
