import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, ClassVar, Dict, List, Optional, Tuple, Type, Union

from google.api_core.exceptions import GoogleAPICallError
from google.api_core.exceptions import NotFound as DocumentMissing
from google.cloud.firestore_v1 import AsyncClient
from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.field_path import FieldPath

from .enums import CLIENT_SIDE_OPERATORS, FirestoreOperators, OrderByDirection
from .errors import NotFound, StoreError
from .firestore_client import FirestoreDB
from .firestore_fields import FirestoreField
from .pydantic_compat import (
    BaseModel,
    Field,
    PydanticVersion,
    get_model_config,
    get_model_fields,
    model_dump_compat,
)


# Alias for the first element in order-by tuple
FieldType = Union[str, FirestoreField]
# Alias for field ordering tuples
FieldOrderType = Tuple[FieldType, OrderByDirection]
FilterType = Tuple[FieldType, Union[str, FirestoreOperators], Any]

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str, collection: str):
    try:
        yield
    except GoogleAPICallError as exc:
        logger.error(f"Firestore {operation} on {collection} failed: {exc}")
        raise StoreError(f"Document store failure during {operation}") from exc


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _matches(data: Dict[str, Any], filters: List[FilterType]) -> bool:
    """Evaluate client-side filters against a raw document dict."""
    for field_name, op, value in filters:
        if op == FirestoreOperators.ICONTAINS:
            needle = str(value).lower()
            haystack = data.get(str(field_name))
            if haystack is None or needle not in str(haystack).lower():
                return False
    return True


class BaseFirestoreModel(BaseModel):
    """
    Base ODM for Firestore with asynchronous operations.
    """

    # --------------------------------------------------------------------------
    # Default field (document ID)
    # --------------------------------------------------------------------------
    id: Optional[str] = Field(default=None)

    # --------------------------------------------------------------------------
    # Class attribute for injected FirestoreDB instance
    # --------------------------------------------------------------------------
    _db: ClassVar[Optional[FirestoreDB]] = None

    # --------------------------------------------------------------------------
    # Collection definition
    # --------------------------------------------------------------------------
    class Settings:
        name: str = "BaseCollection"  # Override in subclasses

    # --------------------------------------------------------------------------
    # Pydantic configuration
    # --------------------------------------------------------------------------
    if PydanticVersion >= 2:
        model_config = get_model_config()
    else:
        class Config:
            allow_population_by_field_name = True

    @classmethod
    def initialize_fields(cls) -> None:
        """Expose every model field as a class-level :class:`FirestoreField`."""
        fields_dict = get_model_fields(cls)

        for field_name, field_info in fields_dict.items():
            alias = (
                FieldPath.document_id() if field_name == "id"
                else (field_info.alias or field_name)  # type: ignore[attr-defined]
            )
            setattr(cls, field_name, FirestoreField(alias))

    # --------------------------------------------------------------------------
    # Database initialization methods (injection)
    # --------------------------------------------------------------------------
    @classmethod
    def initialize_db(cls, db: FirestoreDB):
        """
        Inject the FirestoreDB instance to be used for all operations.
        """
        cls._db = db

    @classmethod
    def _client(cls) -> AsyncClient:
        if not cls._db:
            raise RuntimeError("Database must be initialized before using the model.")
        return cls._db.client

    @property
    def collection_name(self) -> str:
        """
        Return the Firestore collection name for this model.
        """
        return self.get_collection_name()

    @classmethod
    def get_collection_name(cls) -> str:
        if hasattr(cls, "Settings") and hasattr(cls.Settings, "name"):
            return cls.Settings.name
        return cls.__name__

    # --------------------------------------------------------------------------
    # Persistence: whole-document upsert and delete
    # --------------------------------------------------------------------------
    def to_document(self, exclude_none=True, by_alias=True) -> Dict[str, Any]:
        """Serialize the model as stored (aliases as keys, no ``id``)."""
        return model_dump_compat(
            self,
            exclude={"id"},
            exclude_none=exclude_none,
            by_alias=by_alias,
        )

    def _stamp(self, now: datetime) -> None:
        """Set write timestamps.  Subclasses extend it to stamp embedded data."""
        fields = get_model_fields(type(self))
        if "created_at" in fields and getattr(self, "created_at", None) is None:
            self.created_at = now
        if "updated_at" in fields:
            self.updated_at = now

    async def save(self, exclude_none=True, by_alias=True) -> "BaseFirestoreModel":
        """
        Write the whole document, creating it when it does not exist yet.

        A document ID is generated when the model has none.  Fields missing
        from the model are removed from the stored document.
        """
        collection_ref = self._client().collection(self.collection_name)

        if not self.id:
            doc_ref = collection_ref.document()
            self.id = doc_ref.id
        else:
            doc_ref = collection_ref.document(self.id)

        self._stamp(utcnow())
        data_to_save = self.to_document(exclude_none=exclude_none, by_alias=by_alias)
        logger.debug(f"Save: {self.collection_name} - id={self.id}")
        with _store_errors("save", self.collection_name):
            await doc_ref.set(data_to_save)
        return self

    async def replace(self, exclude_none=True, by_alias=True) -> "BaseFirestoreModel":
        """
        Overwrite every stored field of an existing document.

        Unlike :meth:`save` this never creates the document: when it was
        deleted after being read, :class:`NotFound` is raised and nothing
        is written.
        """
        if not self.id:
            raise ValueError("Cannot replace a document without an ID.")
        doc_ref = self._client().collection(self.collection_name).document(self.id)

        self._stamp(utcnow())
        data_to_save = self.to_document(exclude_none=exclude_none, by_alias=by_alias)
        logger.debug(f"Replace: {self.collection_name} - id={self.id}")
        with _store_errors("replace", self.collection_name):
            try:
                await doc_ref.update(data_to_save)
            except DocumentMissing as exc:
                raise NotFound(type(self).__name__, self.id) from exc
        return self

    async def delete(self) -> None:
        """
        Delete the document from Firestore.
        """
        if not self.id:
            raise ValueError("Cannot delete a document without an ID.")
        await self.delete_by_id(self.id)

    @classmethod
    async def delete_by_id(cls, doc_id: str) -> None:
        """
        Delete a document by ID.  Deleting a missing document is a no-op.
        """
        doc_ref = cls._client().collection(cls.get_collection_name()).document(doc_id)
        with _store_errors("delete", cls.get_collection_name()):
            await doc_ref.delete()

    # --------------------------------------------------------------------------
    # Get a document by ID
    # --------------------------------------------------------------------------
    @classmethod
    async def get(cls, doc_id: str) -> Optional["BaseFirestoreModel"]:
        """
        Retrieve a document by its ID, or None when it does not exist.
        """
        doc_ref = cls._client().collection(cls.get_collection_name()).document(doc_id)
        with _store_errors("get", cls.get_collection_name()):
            doc_snap = await doc_ref.get()

        if doc_snap.exists:
            data = doc_snap.to_dict()
            data["id"] = doc_snap.id
            return cls(**data)
        return None

    @classmethod
    async def exists(cls, doc_id: str) -> bool:
        doc_ref = cls._client().collection(cls.get_collection_name()).document(doc_id)
        with _store_errors("exists", cls.get_collection_name()):
            doc_snap = await doc_ref.get()
        return doc_snap.exists

    # --------------------------------------------------------------------------
    # Count documents
    # --------------------------------------------------------------------------
    @classmethod
    async def count(cls, filters: Optional[List[FilterType]] = None) -> int:
        """
        Return the number of documents matching the given filters.

        Uses an aggregation query when every filter is native.  Client-side
        filters, or an SDK without ``.count()``, force a fetch-and-count.
        """
        native, local = cls._split_filters(filters or [])
        query = cls._build_query(cls._client(), filters=native)

        with _store_errors("count", cls.get_collection_name()):
            if local:
                total = 0
                async for doc in query.stream():
                    if _matches(doc.to_dict(), local):
                        total += 1
                return total
            try:
                count_snapshot = await query.count().get()
                return count_snapshot[0][0].value
            except AttributeError:
                logger.warning("Firestore: Performing count by fetching all items with empty select")
                docs = await query.select([]).get()
                return len(docs)

    # --------------------------------------------------------------------------
    # Find (asynchronous generator)
    # --------------------------------------------------------------------------
    @classmethod
    async def find(
        cls,
        filters: Optional[List[FilterType]] = None,
        projection: Optional[Type[BaseModel]] = None,
        order_by: Optional[
            Union[List[Union[FieldType, FieldOrderType]], Union[FieldType, FieldOrderType]]
        ] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> AsyncGenerator[Union["BaseFirestoreModel", BaseModel], None]:
        """
        Asynchronously search for documents matching filters and yield instances.

        Ordering follows Firestore: documents without an ``order_by`` field are
        left out, and ties are broken by document ID.
        """
        native, local = cls._split_filters(filters or [])
        # Client-side filters need every field they test, so no projection then.
        query = cls._build_query(
            cls._client(), filters=native, projection=None if local else projection
        )

        if order_by:
            if not isinstance(order_by, list):
                order_by = [order_by]
            for order_by_field in order_by:
                if isinstance(order_by_field, tuple):
                    field, direction = order_by_field
                    query = query.order_by(str(field), direction=str(direction))
                else:
                    query = query.order_by(str(order_by_field))

        # Pagination happens after client-side matching when there is any
        if not local:
            if offset is not None:
                query = query.offset(offset)
            if limit is not None:
                query = query.limit(limit)

        constructor = cls if projection is None else projection
        skipped = 0
        yielded = 0
        with _store_errors("find", cls.get_collection_name()):
            async for doc in query.stream():
                data = doc.to_dict()
                if local:
                    if not _matches(data, local):
                        continue
                    if offset and skipped < offset:
                        skipped += 1
                        continue
                    if limit is not None and yielded >= limit:
                        break
                data["id"] = doc.id
                yielded += 1
                yield constructor(**data)

    @classmethod
    async def find_one(
        cls,
        filters: Optional[List[FilterType]] = None,
        projection: Optional[Type[BaseModel]] = None,
        order_by: Optional[Union[FieldType, FieldOrderType]] = None,
    ) -> Optional[Union["BaseFirestoreModel", BaseModel]]:
        """
        Return the first document matching filters, or None if no match.
        """
        async for obj in cls.find(
            filters=filters, projection=projection, order_by=order_by, limit=1
        ):
            return obj
        return None

    # --------------------------------------------------------------------------
    # Internal query builder
    # --------------------------------------------------------------------------
    @staticmethod
    def _split_filters(filters: List[FilterType]) -> Tuple[List[FilterType], List[FilterType]]:
        native, local = [], []
        for field_filter in filters:
            if field_filter[1] in CLIENT_SIDE_OPERATORS:
                local.append(field_filter)
            else:
                native.append(field_filter)
        return native, local

    @classmethod
    def _build_query(
        cls,
        db_client: AsyncClient,
        filters: List[FilterType],
        projection: Optional[Type[BaseModel]] = None,
    ):
        """
        Build a Firestore query applying native filters and optional projection.
        """
        query = db_client.collection(cls.get_collection_name())

        for (field_name, op, value) in filters:
            op_string = op.value if isinstance(op, FirestoreOperators) else op
            query = query.where(filter=FieldFilter(str(field_name), op_string, value))

        if projection:
            select_fields = list(get_model_fields(projection).keys())
            logger.debug(f"Build Query: select fields: {select_fields}")
            query = query.select(select_fields)

        return query
