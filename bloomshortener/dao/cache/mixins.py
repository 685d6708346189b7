"""Cache mixin providing AWS-resolved ElastiCache client initialization.

Responsibilities:
    - Initialize a TLS-enabled Redis client targeting AWS ElastiCache.
    - Resolve connection parameters from AWS SSM Parameter Store (one batched call).
    - Resolve credentials from AWS Secrets Manager.
    - Delegate healthcheck and client lifecycle to RedisClientMixin (an
      unreachable cache is logged, never fatal).

Classes:
    - ElastiCacheClientMixin: Base mixin to inject AWS-resolved client setup
      (TLS + AUTH) and reuse RedisClientMixin's healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLCacheDAO(ElastiCacheClientMixin, ShortURLCacheBaseDAO):
        ...     pass
        ...
        >>> dao = ShortURLCacheDAO(prefix="bloomshortener:dev")
        >>> dao._healthcheck()
        True

Environment variables (paths/names to resolve at runtime):
    - ELASTICACHE_HOST_PARAM  : SSM parameter path for Redis host
    - ELASTICACHE_PORT_PARAM  : SSM parameter path for Redis port
    - ELASTICACHE_DB_PARAM    : SSM parameter path for Redis DB index
    - ELASTICACHE_USER_PARAM  : SSM parameter path for Redis username (optional)
    - ELASTICACHE_SECRET      : Secrets Manager name for {"username": "...", "password": "..."}
    - LOCALSTACK_ENDPOINT     : LocalStack endpoint URL for local development
"""

import json
import os
from typing import Optional

import boto3
import redis
from botocore.client import BaseClient

from bloomshortener.constants import ENV, RedisTimeout
from bloomshortener.types import SSMClient, SecretsManagerClient
from bloomshortener.dao.cache.cache_key_schema import CacheKeySchema
from bloomshortener.dao.redis.mixins import RedisClientMixin
from bloomshortener.utils.runtime import running_locally
from bloomshortener.utils.helpers import require_environment


def _aws_client(service: str) -> BaseClient:
    # fmt: off
    client_kwargs = {
        'endpoint_url': os.environ.get(ENV.LocalStack.ENDPOINT, 'http://localhost:4566'),
    } if running_locally() else {}
    # fmt: on
    return boto3.client(service, **client_kwargs)


class ElastiCacheClientMixin(RedisClientMixin):
    """Mixin ElastiCache client setup using AWS SSM/Secrets with TLS by default.

    Attributes:
        redis (redis.Redis):
            Active Redis client instance created with TLS and (optional) AUTH.

        keys (CacheKeySchema):
            Helper class for generating namespaced cache key names.

    Args:
        prefix (Optional[str]):
            Namespace prefix for all cache keys, e.g. 'app:env'.
        redis_client (Optional[redis.Redis]):
            Pre-initialized Redis client. If given, AWS resolution is skipped.
        ssm_client (Optional[BaseClient]):
            Optional boto3 SSM client to reuse (useful in tests).
        secrets_client (Optional[BaseClient]):
            Optional boto3 Secrets Manager client to reuse (useful in tests).
        socket_timeout (float):
            Seconds to wait on a cache command. Defaults to RedisTimeout.CACHE.
        tls_verify (bool):
            If True, require certificate verification (ssl_cert_reqs='required').
        ca_bundle_path (Optional[str]):
            Optional path to a CA bundle file for certificate verification.

    Raises:
        MissingEnvironmentVariableError:
            If required environment variables are missing.
        ValueError:
            If SSM values are malformed or the secret payload is not valid JSON.
        botocore.exceptions.BotoCoreError / ClientError:
            On AWS API failures while reading SSM or Secrets Manager.

    NOTE: A failed PING after initialization is only logged. Cache reads and
          writes then fail individually and the pipeline falls back to the store.
    """

    healthcheck_required = False

    def __init__(
        self,
        prefix: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        ssm_client: Optional[SSMClient] = None,
        secrets_client: Optional[SecretsManagerClient] = None,
        socket_timeout: float = RedisTimeout.CACHE,
        tls_verify: bool = False,
        ca_bundle_path: Optional[str] = None,
    ):
        if redis_client is None:
            host, port, db, user_from_ssm = self._resolve_ssm_params(ssm_client or _aws_client('ssm'))
            username, password = self._resolve_secret(secrets_client or _aws_client('secretsmanager'))

            client_kwargs = dict(
                host=host,
                port=port,
                db=db,
                username=username or user_from_ssm,
                password=password,
                decode_responses=True,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )
            if running_locally():
                client_kwargs.update(ssl=False)
            else:
                client_kwargs.update(ssl=True, ssl_cert_reqs='required' if tls_verify else None)
                if tls_verify and ca_bundle_path:
                    client_kwargs['ssl_ca_certs'] = ca_bundle_path

            redis_client = redis.Redis(**client_kwargs)

        super().__init__(redis_client=redis_client, prefix=prefix)
        self.keys = CacheKeySchema(prefix=prefix)

    @staticmethod
    @require_environment(ENV.ElastiCache.HOST_PARAM, ENV.ElastiCache.PORT_PARAM, ENV.ElastiCache.DB_PARAM)
    def _resolve_ssm_params(ssm: SSMClient) -> tuple[str, int, int, Optional[str]]:
        """Resolve host, port, db, and optional username from SSM Parameter Store.

        Returns:
            tuple[str, int, int, Optional[str]]:
                (host, port, db, user_from_ssm_or_none)

        Raises:
            ValueError:
                If a parameter is missing from the response or port/db aren't integers.
        """
        names = {
            'host': os.environ[ENV.ElastiCache.HOST_PARAM],
            'port': os.environ[ENV.ElastiCache.PORT_PARAM],
            'db': os.environ[ENV.ElastiCache.DB_PARAM],
        }
        if user_param := os.environ.get(ENV.ElastiCache.USER_PARAM):
            names['user'] = user_param

        response = ssm.get_parameters(Names=list(names.values()))
        values = {parameter['Name']: parameter['Value'] for parameter in response.get('Parameters', [])}
        missing = [name for name in names.values() if name not in values]
        if missing:
            raise ValueError(f'SSM parameters not found: {", ".join(missing)}')

        try:
            port = int(values[names['port']])
            db = int(values[names['db']])
        except (TypeError, ValueError) as e:
            raise ValueError(f'Invalid ElastiCache port/db values: port={values[names["port"]]!r} db={values[names["db"]]!r}') from e

        user = values[names['user']] if 'user' in names else None
        return values[names['host']], port, db, user

    @staticmethod
    @require_environment(ENV.ElastiCache.SECRET)
    def _resolve_secret(secrets: SecretsManagerClient) -> tuple[Optional[str], Optional[str]]:
        """Resolve optional username and password from Secrets Manager.

        The secret is expected to be a JSON object: {"username": "...", "password": "..."}.

        Raises:
            ValueError:
                If the secret payload is not valid JSON.
        """
        raw = secrets.get_secret_value(SecretId=os.environ[ENV.ElastiCache.SECRET]).get('SecretString')
        try:
            payload = json.loads(raw or '{}')
        except json.JSONDecodeError as e:
            raise ValueError('Invalid JSON in ElastiCache secret payload') from e

        return payload.get('username'), payload.get('password')
