"""
Record store adapters for file metadata.

Records are plain dicts with camelCase keys, addressed by ``fileId``.
"""

import json
import logging
import sqlite3
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from uploads_api.aws.clients import create_dynamodb_client
from uploads_api.config.settings import Settings

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBClient

logger = logging.getLogger(__name__)

RECORD_KEY = "fileId"


class BaseRecordStore:
    """Base class for record stores (to be extended by specific implementations)"""

    def get(self, file_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def put(self, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    def update(self, file_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Apply ``changes`` to an existing record and return the result, or None if absent.

        Must never create a record: a delete that lands first wins.
        """
        raise NotImplementedError

    def delete(self, file_id: str) -> None:
        raise NotImplementedError

    def scan(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def ping(self) -> None:
        """Raise if the store is unreachable."""
        raise NotImplementedError


def _normalize_numbers(value: Any) -> Any:
    """DynamoDB returns every number as Decimal; turn them back into int/float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _normalize_numbers(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize_numbers(v) for v in value]
    return value


class DynamoDBRecordStore(BaseRecordStore):
    """File records in a DynamoDB table whose partition key is ``fileId``."""

    def __init__(self, dynamodb_client: "DynamoDBClient", table_name: str):
        self.client = dynamodb_client
        self.table_name = table_name
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()
        logger.info(f"DynamoDBRecordStore initialized for table {table_name}")

    def _to_item(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return {k: self._serializer.serialize(v) for k, v in record.items()}

    def _from_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return _normalize_numbers({k: self._deserializer.deserialize(v) for k, v in item.items()})

    def get(self, file_id: str) -> Optional[Dict[str, Any]]:
        response = self.client.get_item(
            TableName=self.table_name,
            Key={RECORD_KEY: {"S": file_id}},
        )
        item = response.get("Item")
        return self._from_item(item) if item else None

    def put(self, record: Dict[str, Any]) -> None:
        self.client.put_item(TableName=self.table_name, Item=self._to_item(record))

    def update(self, file_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        names = {f"#f{i}": field for i, field in enumerate(changes)}
        values = {f":v{i}": self._serializer.serialize(value) for i, value in enumerate(changes.values())}
        assignments = ", ".join(f"#f{i} = :v{i}" for i in range(len(changes)))
        try:
            response = self.client.update_item(
                TableName=self.table_name,
                Key={RECORD_KEY: {"S": file_id}},
                UpdateExpression=f"SET {assignments}",
                ConditionExpression=f"attribute_exists({RECORD_KEY})",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                logger.info(f"Record {file_id} is gone, update skipped")
                return None
            raise
        return self._from_item(response["Attributes"])

    def delete(self, file_id: str) -> None:
        self.client.delete_item(
            TableName=self.table_name,
            Key={RECORD_KEY: {"S": file_id}},
        )

    def scan(self) -> List[Dict[str, Any]]:
        records = []
        paginator = self.client.get_paginator("scan")
        for page in paginator.paginate(TableName=self.table_name):
            records.extend(self._from_item(item) for item in page.get("Items", []))
        return records

    def ping(self) -> None:
        self.client.describe_table(TableName=self.table_name)

    def create_table(self) -> bool:
        """
        Create the table (on-demand billing) if it does not exist yet.

        :return: True if the table was created, False if it already existed.
        """
        existing = self.client.list_tables().get("TableNames", [])
        if self.table_name in existing:
            logger.info(f"Table {self.table_name} already exists")
            return False

        self.client.create_table(
            TableName=self.table_name,
            KeySchema=[{"AttributeName": RECORD_KEY, "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": RECORD_KEY, "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        self.client.get_waiter("table_exists").wait(TableName=self.table_name)
        logger.info(f"Created table {self.table_name}")
        return True


class SQLiteRecordStore(BaseRecordStore):
    """File records as JSON documents in a local SQLite database (local-dev)."""

    def __init__(self, db_path: str = "files.db"):
        self.db_path = db_path
        self.init_collection()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_collection(self) -> None:
        """Initialize the file records collection (table)"""
        conn = self._get_connection()
        try:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS file_records_docs (
                    file_id TEXT PRIMARY KEY,
                    document TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.commit()
        finally:
            conn.close()

    def get(self, file_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                'SELECT document FROM file_records_docs WHERE file_id = ?', (file_id,)
            ).fetchone()
            return json.loads(row['document']) if row else None
        finally:
            conn.close()

    def put(self, record: Dict[str, Any]) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                'INSERT OR REPLACE INTO file_records_docs (file_id, document) VALUES (?, ?)',
                (record[RECORD_KEY], json.dumps(record)),
            )
            conn.commit()
        finally:
            conn.close()

    def update(self, file_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        conn = self._get_connection()
        try:
            # write lock up front so no delete can slip between the read and the write
            conn.execute('BEGIN IMMEDIATE')
            row = conn.execute(
                'SELECT document FROM file_records_docs WHERE file_id = ?', (file_id,)
            ).fetchone()
            if row is None:
                conn.rollback()
                return None
            record = json.loads(row['document'])
            record.update(changes)
            cursor = conn.execute(
                'UPDATE file_records_docs SET document = ? WHERE file_id = ?',
                (json.dumps(record), file_id),
            )
            if cursor.rowcount == 0:
                conn.rollback()
                return None
            conn.commit()
            return record
        finally:
            conn.close()

    def delete(self, file_id: str) -> None:
        conn = self._get_connection()
        try:
            conn.execute('DELETE FROM file_records_docs WHERE file_id = ?', (file_id,))
            conn.commit()
        finally:
            conn.close()

    def scan(self) -> List[Dict[str, Any]]:
        conn = self._get_connection()
        try:
            rows = conn.execute('SELECT document FROM file_records_docs ORDER BY created_at, rowid').fetchall()
            return [json.loads(row['document']) for row in rows]
        finally:
            conn.close()

    def ping(self) -> None:
        conn = self._get_connection()
        try:
            conn.execute('SELECT 1 FROM file_records_docs LIMIT 1')
        finally:
            conn.close()


def create_record_store(settings: Settings, dynamodb_client: Optional["DynamoDBClient"] = None) -> BaseRecordStore:
    """Build the record store selected by ``settings.record_store_backend``."""
    if settings.record_store_backend == "sqlite":
        logger.info(f"Using SQLite record store at {settings.sqlite_db_path}")
        return SQLiteRecordStore(settings.sqlite_db_path)

    if dynamodb_client is None:
        dynamodb_client = create_dynamodb_client(settings)
    return DynamoDBRecordStore(dynamodb_client, settings.files_table_name)
