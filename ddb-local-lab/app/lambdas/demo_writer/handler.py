# app/lambdas/demo_writer/handler.py
import json
import logging
import os
import threading
import traceback
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import boto3
from botocore.exceptions import ClientError
from botocore.exceptions import ConnectionError as BotoConnectionError

logger = logging.getLogger()
logger.setLevel(logging.INFO)

DEFAULT_REGION = "us-east-1"
DEFAULT_TABLE_NAME = "TestTable"

# DynamoDB Local accepts any credentials
LOCAL_CREDENTIALS = {"aws_access_key_id": "fake", "aws_secret_access_key": "fake"}

DEMO_ITEM = {"id": "1", "name": "Demo"}

MISSING_TABLE_MESSAGE = "Cannot do operations on a non-existent table"

_lock = threading.Lock()
_resources: Dict["DynamoConfig", Any] = {}


@dataclass(frozen=True)
class DynamoConfig:
    region: str = DEFAULT_REGION
    endpoint: Optional[str] = None
    table_name: str = DEFAULT_TABLE_NAME

    @property
    def is_local(self) -> bool:
        return bool(self.endpoint)

    @property
    def environment(self) -> str:
        return "local" if self.is_local else "production"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DynamoConfig":
        """
        DYNAMODB_ENDPOINT set  -> DynamoDB Local, placeholder credentials.
        DYNAMODB_ENDPOINT unset -> AWS DynamoDB, Lambda execution role.
        """
        env = os.environ if environ is None else environ
        return cls(
            region=env.get("AWS_REGION") or DEFAULT_REGION,
            endpoint=env.get("DYNAMODB_ENDPOINT") or None,
            table_name=env.get("DYNAMODB_TABLE_NAME") or DEFAULT_TABLE_NAME,
        )


def make_resource(config: DynamoConfig):
    kwargs = {"region_name": config.region}
    if config.is_local:
        kwargs["endpoint_url"] = config.endpoint
        kwargs.update(LOCAL_CREDENTIALS)
    return boto3.resource("dynamodb", **kwargs)


def get_resource(config: DynamoConfig):
    """Return the process-wide DynamoDB resource for *config*, creating it on first use."""
    with _lock:
        if config not in _resources:
            _resources[config] = make_resource(config)
        return _resources[config]


def reset_resources() -> None:
    with _lock:
        _resources.clear()


def _response(status_code: int, body) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "body": body if isinstance(body, str) else json.dumps(body),
    }


def _error_code(exc: Exception) -> Optional[str]:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code")
    code = getattr(exc, "code", None)
    return None if code is None else str(code)


def classify_error(exc: Exception) -> str:
    code = _error_code(exc)
    message = str(exc)

    if code == "ResourceNotFoundException" or MISSING_TABLE_MESSAGE in message:
        return "table_not_found"
    if isinstance(exc, (BotoConnectionError, ConnectionError)) or "connect" in message:
        return "connection"
    return "unknown"


def error_body(exc: Exception, config: DynamoConfig) -> Dict[str, Any]:
    endpoint = config.endpoint or "AWS DynamoDB"
    kind = classify_error(exc)

    if kind == "table_not_found":
        return {
            "message": "Table does not exist",
            "error": f"{config.table_name} not found in DynamoDB. "
                     "Please run scripts/setup_table.py to create it.",
        }
    if kind == "connection":
        return {
            "message": "Connection error",
            "error": "Cannot connect to DynamoDB",
            "endpoint": endpoint,
        }
    return {
        "message": "Internal server error",
        "error": str(exc) or repr(exc),
        "code": _error_code(exc) or "UNKNOWN",
        "endpoint": endpoint,
        "type": type(exc).__name__,
        "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    }


def put_demo_item(resource, table_name: str) -> None:
    resource.Table(table_name).put_item(Item=dict(DEMO_ITEM))


def handle(event, config: DynamoConfig, resource) -> Dict[str, Any]:
    logger.info("Connecting to DynamoDB at: %s", config.endpoint or "AWS DynamoDB (production)")
    logger.info("Using table: %s", config.table_name)

    try:
        put_demo_item(resource, config.table_name)
    except Exception as e:
        logger.exception("Write to %s failed", config.table_name)
        logger.error("Error code: %s", _error_code(e))
        logger.error("Error message: %s", e)
        return _response(500, error_body(e, config))

    logger.info("Successfully wrote to DynamoDB")

    return _response(200, {
        "message": "DynamoDB Local works!" if config.is_local else "AWS DynamoDB works!",
        "table": config.table_name,
        "environment": config.environment,
    })


def lambda_handler(event, context):
    """
    Write the demo record to DynamoDB and report which backend answered.
    The event is not inspected.
    """
    config = DynamoConfig.from_env()
    try:
        resource = get_resource(config)
    except Exception as e:
        logger.exception("Could not create DynamoDB resource")
        return _response(500, error_body(e, config))
    return handle(event, config, resource)
