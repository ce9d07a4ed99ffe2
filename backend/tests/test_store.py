# backend/tests/test_store.py
#
# This file contains the unit tests for the DynamoDB-backed document store in
# `rxguard/store.py`. Each table is replaced by a MagicMock so no AWS call is
# ever made.

from unittest.mock import MagicMock

import pytest

from backend.rxguard.errors import DocumentNotFound
from backend.rxguard.store import Collection, DynamoDocumentStore, get_document_store


def _store(table, indexes=None):
    return DynamoDocumentStore({"things": Collection(table, key="thingId", indexes=indexes or {})})


@pytest.mark.asyncio
async def test_get_document_found():
    mock_table = MagicMock()
    fake_item = {"thingId": "t1", "name": "Test"}
    mock_table.get_item.return_value = {"Item": fake_item}

    result = await _store(mock_table).get_document("things", "t1")

    mock_table.get_item.assert_called_once_with(Key={"thingId": "t1"})
    assert result == fake_item


@pytest.mark.asyncio
async def test_get_document_not_found():
    mock_table = MagicMock()
    mock_table.get_item.return_value = {}

    with pytest.raises(DocumentNotFound) as excinfo:
        await _store(mock_table).get_document("things", "missing")

    assert excinfo.value.collection == "things"
    assert excinfo.value.document_id == "missing"


@pytest.mark.asyncio
async def test_unknown_collection_is_rejected():
    with pytest.raises(ValueError):
        await _store(MagicMock()).get_document("elsewhere", "t1")


@pytest.mark.asyncio
async def test_list_documents_uses_index_for_single_indexed_filter():
    mock_table = MagicMock()
    mock_table.query.return_value = {"Items": [{"thingId": "t1", "ownerId": "o1"}]}

    result = await _store(mock_table, {"ownerId": "ownerId-index"}).list_documents("things", {"ownerId": "o1"})

    assert result == [{"thingId": "t1", "ownerId": "o1"}]
    mock_table.query.assert_called_once()
    assert mock_table.query.call_args.kwargs["IndexName"] == "ownerId-index"
    mock_table.scan.assert_not_called()


@pytest.mark.asyncio
async def test_list_documents_scans_unindexed_filters():
    mock_table = MagicMock()
    mock_table.scan.return_value = {"Items": []}

    result = await _store(mock_table, {"ownerId": "ownerId-index"}).list_documents(
        "things", {"ownerId": "o1", "status": "ACTIVE"}
    )

    assert result == []
    mock_table.scan.assert_called_once()
    assert "FilterExpression" in mock_table.scan.call_args.kwargs
    mock_table.query.assert_not_called()


@pytest.mark.asyncio
async def test_list_documents_follows_pagination():
    mock_table = MagicMock()
    mock_table.scan.side_effect = [
        {"Items": [{"thingId": "t1"}], "LastEvaluatedKey": {"thingId": "t1"}},
        {"Items": [{"thingId": "t2"}]},
    ]

    result = await _store(mock_table).list_documents("things", {"status": "ACTIVE"})

    assert [item["thingId"] for item in result] == ["t1", "t2"]
    assert mock_table.scan.call_count == 2
    assert mock_table.scan.call_args_list[1].kwargs["ExclusiveStartKey"] == {"thingId": "t1"}


@pytest.mark.asyncio
async def test_create_document_assigns_id_and_timestamp():
    mock_table = MagicMock()

    created = await _store(mock_table).create_document("things", {"name": "new"})

    mock_table.put_item.assert_called_once_with(Item=created)
    assert created["name"] == "new"
    assert created["thingId"]
    assert created["createdAt"]


def test_default_store_wires_all_collections(mocker):
    mocker.patch("backend.rxguard.store._default_store", None)

    store = get_document_store()

    assert set(store.collections) == {"appointments", "prescriptions", "prescription_medications", "audit_logs"}
    assert store.collections["prescriptions"].indexes == {"appointmentId": "appointmentId-index"}
    assert get_document_store() is store
