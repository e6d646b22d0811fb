"""
Tests for SaveValuesUseCase
"""
import uuid

import pytest
from unittest.mock import Mock

from app.core.use_cases.save_values import SaveValuesUseCase
from app.core.domain.entities.search import SaveRequest
from app.core.domain.exceptions import EmbeddingGenerationError, InvalidRequestError
from app.core.ports.logger import Logger


@pytest.fixture
def mock_logger():
    return Mock(spec=Logger)


@pytest.fixture
def save_use_case(mock_embedding_service, mock_vector_store, mock_logger):
    return SaveValuesUseCase(
        embedding_service=mock_embedding_service,
        vector_store=mock_vector_store,
        collection_name="test",
        logger=mock_logger,
    )


class TestSaveValues:

    @pytest.mark.asyncio
    async def test_one_record_per_value(self, save_use_case, mock_vector_store):
        result = await save_use_case.save(SaveRequest(key="color", values=["red", "blue"]))

        collection, records = mock_vector_store.upsert.call_args.args
        assert collection == "test"
        assert [r.metadata for r in records] == [
            {"key": "color", "value": "red"},
            {"key": "color", "value": "blue"},
        ]
        assert result.key == "color"
        assert result.ids == [r.id for r in records]

    @pytest.mark.asyncio
    async def test_record_ids_are_uuids(self, save_use_case, mock_vector_store):
        result = await save_use_case.save(SaveRequest(key="color", values=["red", "blue"]))

        for record_id in result.ids:
            uuid.UUID(record_id)
        assert len(set(result.ids)) == 2

    @pytest.mark.asyncio
    async def test_values_embedded_in_one_batch(self, save_use_case, mock_embedding_service):
        await save_use_case.save(SaveRequest(key="color", values=["red", "blue", "green"]))

        mock_embedding_service.generate_embeddings_batch.assert_awaited_once_with(
            ["red", "blue", "green"]
        )

    @pytest.mark.asyncio
    async def test_collection_created_with_embedding_dimension(self, save_use_case, mock_vector_store):
        await save_use_case.save(SaveRequest(key="color", values=["red"]))

        mock_vector_store.ensure_collection.assert_awaited_once_with("test", 3)

    @pytest.mark.asyncio
    async def test_logs_saved_count(self, save_use_case, mock_logger):
        await save_use_case.save(SaveRequest(key="color", values=["red"]))

        mock_logger.info.assert_called_once()
        assert "Saved 1 values" in mock_logger.info.call_args.args[0]

    @pytest.mark.asyncio
    async def test_blank_values_rejected(self, save_use_case, mock_vector_store):
        with pytest.raises(InvalidRequestError):
            await save_use_case.save(SaveRequest(key="color", values=["", "   "]))

        mock_vector_store.upsert.assert_not_called()

    @pytest.mark.asyncio
    async def test_single_blank_value_rejected_by_index(
        self, save_use_case, mock_embedding_service, mock_vector_store
    ):
        with pytest.raises(InvalidRequestError, match="index 1"):
            await save_use_case.save(SaveRequest(key="color", values=["red", "  ", "blue"]))

        mock_embedding_service.generate_embeddings_batch.assert_not_awaited()
        mock_vector_store.upsert.assert_not_called()

    @pytest.mark.asyncio
    async def test_embedding_count_mismatch_rejected(
        self, save_use_case, mock_embedding_service, mock_vector_store, make_vector
    ):
        mock_embedding_service.generate_embeddings_batch.side_effect = None
        mock_embedding_service.generate_embeddings_batch.return_value = [make_vector([1.0, 0.0])]

        with pytest.raises(EmbeddingGenerationError):
            await save_use_case.save(SaveRequest(key="color", values=["red", "blue"]))

        mock_vector_store.upsert.assert_not_called()

    @pytest.mark.asyncio
    async def test_embedding_failure_stops_save(
        self, save_use_case, mock_embedding_service, mock_vector_store
    ):
        mock_embedding_service.generate_embeddings_batch.side_effect = ConnectionError("refused")

        with pytest.raises(EmbeddingGenerationError):
            await save_use_case.save(SaveRequest(key="color", values=["red"]))

        mock_vector_store.upsert.assert_not_called()
