"""
DynamoDB Local table setup
==========================
Creates the demo table used by the demo_writer Lambda if it does not exist
yet, then waits until it is ACTIVE. Safe to run repeatedly.

Environment:
  DYNAMODB_ENDPOINT     endpoint to provision (default http://localhost:8000)
  DYNAMODB_TABLE_NAME   table to create (default TestTable)
  AWS_REGION            region name (default us-east-1)

Example usage:
  docker run -p 8000:8000 amazon/dynamodb-local
  python scripts/setup_table.py
"""
from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

import boto3
from botocore.exceptions import ClientError

LOCAL_ENDPOINT = "http://localhost:8000"
DEFAULT_REGION = "us-east-1"
DEFAULT_TABLE_NAME = "TestTable"

TABLE_DEFINITION = {
    "AttributeDefinitions": [{"AttributeName": "id", "AttributeType": "S"}],
    "KeySchema": [{"AttributeName": "id", "KeyType": "HASH"}],
    "BillingMode": "PAY_PER_REQUEST",
}


def make_client(endpoint: str = LOCAL_ENDPOINT, region: str = DEFAULT_REGION):
    return boto3.client(
        "dynamodb",
        endpoint_url=endpoint,
        region_name=region,
        aws_access_key_id="fake",
        aws_secret_access_key="fake",
    )


def table_exists(client, table_name: str) -> bool:
    try:
        client.describe_table(TableName=table_name)
    except ClientError as exc:
        if exc.response["Error"]["Code"] == "ResourceNotFoundException":
            return False
        raise
    return True


def create_table(client, table_name: str) -> None:
    client.create_table(TableName=table_name, **TABLE_DEFINITION)
    print(f"[✓] Table '{table_name}' created successfully")

    print("[*] Waiting for table to be active...")
    client.get_waiter("table_exists").wait(TableName=table_name)
    print("[✓] Table is now active")


def ensure_table(client, table_name: str) -> bool:
    """Create *table_name* unless it already exists. Returns True if it was created."""
    if table_exists(client, table_name):
        print(f"[✓] Table '{table_name}' already exists")
        return False
    create_table(client, table_name)
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create the demo DynamoDB table if it does not exist"
    )
    parser.parse_args(argv)

    endpoint = os.environ.get("DYNAMODB_ENDPOINT") or LOCAL_ENDPOINT
    region = os.environ.get("AWS_REGION") or DEFAULT_REGION
    table_name = os.environ.get("DYNAMODB_TABLE_NAME") or DEFAULT_TABLE_NAME

    print(f"[*] Using endpoint {endpoint}")
    try:
        ensure_table(make_client(endpoint, region), table_name)
    except Exception as e:
        print(f"[✗] Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
