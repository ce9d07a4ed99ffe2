# rxguard/store.py
#
# The document store the QR authorization flow talks to. It exposes only the
# three operations the flow needs (get by id, list by equality filters, and
# create) over the DynamoDB tables wired up in database.py.

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from boto3.dynamodb.conditions import Attr, Key
from fastapi.concurrency import run_in_threadpool

from .database import (
    appointments_table,
    prescriptions_table,
    prescription_medications_table,
    audit_logs_table,
)
from .errors import DocumentNotFound

# Logical collection names used by the rest of the package.
APPOINTMENTS = "appointments"
PRESCRIPTIONS = "prescriptions"
PRESCRIPTION_MEDICATIONS = "prescription_medications"
AUDIT_LOGS = "audit_logs"


@dataclass
class Collection:
    table: Any
    key: str
    # attribute name -> GSI name, for filters that can be served by a query
    indexes: Dict[str, str] = field(default_factory=dict)


class DynamoDocumentStore:
    """Document store backed by one DynamoDB table per collection."""

    def __init__(self, collections: Dict[str, Collection]):
        self.collections = collections

    def _collection(self, name: str) -> Collection:
        try:
            return self.collections[name]
        except KeyError:
            raise ValueError(f"Unknown collection: {name}")

    async def get_document(self, collection: str, document_id: str) -> Dict[str, Any]:
        coll = self._collection(collection)
        print(f"DB Read: Fetching {collection}/{document_id}")
        response = await run_in_threadpool(coll.table.get_item, Key={coll.key: document_id})
        item = response.get('Item')
        if not item:
            print(f"DB Read: {collection}/{document_id} not found")
            raise DocumentNotFound(collection, document_id)
        return item

    async def list_documents(self, collection: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        coll = self._collection(collection)
        return await run_in_threadpool(self._list_sync, coll, collection, filters)

    def _list_sync(self, coll: Collection, collection: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        if len(filters) == 1:
            attribute, value = next(iter(filters.items()))
            index_name = coll.indexes.get(attribute)
        else:
            index_name = None

        if index_name:
            print(f"DB Read: Querying {collection} on index '{index_name}' where {attribute} = {value}")
            request = {
                'IndexName': index_name,
                'KeyConditionExpression': Key(attribute).eq(value),
            }
            operation = coll.table.query
        else:
            print(f"DB Read: Scanning {collection} with filters {filters}")
            request = {}
            condition = None
            for name, expected in filters.items():
                clause = Attr(name).eq(expected)
                condition = clause if condition is None else condition & clause
            if condition is not None:
                request['FilterExpression'] = condition
            operation = coll.table.scan

        items: List[Dict[str, Any]] = []
        while True:
            response = operation(**request)
            items.extend(response.get('Items', []))
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                break
            request['ExclusiveStartKey'] = last_key

        print(f"DB Read: {len(items)} {collection} document(s) matched")
        return items

    async def create_document(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        coll = self._collection(collection)
        item = dict(data)
        item.setdefault(coll.key, str(uuid.uuid4()))
        item.setdefault('createdAt', datetime.now(timezone.utc).isoformat())
        await run_in_threadpool(coll.table.put_item, Item=item)
        print(f"DB Write: Created {collection}/{item[coll.key]}")
        return item


_default_store: Optional[DynamoDocumentStore] = None


def get_document_store() -> DynamoDocumentStore:
    """FastAPI dependency returning the process-wide DynamoDB document store."""
    global _default_store
    if _default_store is None:
        _default_store = DynamoDocumentStore({
            APPOINTMENTS: Collection(appointments_table, key='appointmentId'),
            PRESCRIPTIONS: Collection(
                prescriptions_table,
                key='prescriptionId',
                indexes={'appointmentId': 'appointmentId-index'},
            ),
            PRESCRIPTION_MEDICATIONS: Collection(
                prescription_medications_table,
                key='medicationId',
                indexes={'prescriptionId': 'prescriptionId-index'},
            ),
            AUDIT_LOGS: Collection(audit_logs_table, key='auditId'),
        })
    return _default_store
