"""
MongoDB data access for authors and books.
Handles connection, indexing, and CRUD operations, translating driver
errors into catalog error types.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from .errors import ConflictError, NotFoundError
from .models import AuthorRecord, BookRecord

logger = structlog.get_logger(__name__)


def to_object_id(value: str, entity: str) -> ObjectId:
    """Parse a document id; malformed ids are reported as not found."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFoundError(f"{entity} {value} not found", entity=entity)


def _duplicate_field(error: DuplicateKeyError) -> Optional[str]:
    """Name of the field that caused a duplicate key error, if reported."""
    details = error.details or {}
    key_pattern = details.get("keyPattern") or details.get("keyValue") or {}
    if key_pattern:
        return next(iter(key_pattern))
    return None


def author_from_document(document: Dict[str, Any]) -> AuthorRecord:
    """Convert a raw ``authors`` document to an AuthorRecord."""
    document = dict(document)
    document["id"] = str(document.pop("_id"))
    return AuthorRecord(**document)


def book_from_document(document: Dict[str, Any]) -> BookRecord:
    """Convert a raw ``books`` document to a BookRecord."""
    document = dict(document)
    document["id"] = str(document.pop("_id"))
    document["author_id"] = str(document["author_id"])
    return BookRecord(**document)


class CatalogDatabase:
    """
    Async MongoDB manager for the catalog.
    Owns the ``authors`` and ``books`` collections.
    """

    def __init__(
        self,
        connection_url: str,
        database_name: str,
        authors_collection: str = "authors",
        books_collection: str = "books"
    ):
        """
        Initialize the catalog database manager.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            authors_collection: Name of the authors collection
            books_collection: Name of the books collection
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.authors_collection_name = authors_collection
        self.books_collection_name = books_collection
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.authors: Optional[AsyncIOMotorCollection] = None
        self.books: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]
            self.authors = self.database[self.authors_collection_name]
            self.books = self.database[self.books_collection_name]

            await self.client.admin.command("ping")
            logger.info("Successfully connected to MongoDB", database=self.database_name)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def _create_indexes(self) -> None:
        """Create uniqueness and query indexes."""
        try:
            await self.authors.create_index("email", unique=True)
            await self.authors.create_index("created_at")

            # ISBN is optional; only string values take part in uniqueness.
            await self.books.create_index(
                "isbn",
                unique=True,
                partialFilterExpression={"isbn": {"$type": "string"}}
            )
            await self.books.create_index("author_id")
            await self.books.create_index("genre")
            await self.books.create_index("created_at")
            await self.books.create_index([("author_id", 1), ("published_year", -1)])

            logger.info("Successfully created MongoDB indexes")

        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    async def ping(self) -> None:
        """Round-trip to the server."""
        await self.database.command("ping")

    # Authors

    async def list_authors(self) -> List[AuthorRecord]:
        """All authors, newest first."""
        try:
            cursor = self.authors.find({}).sort([("created_at", -1)])
            documents = await cursor.to_list(length=None)
            return [author_from_document(doc) for doc in documents]
        except Exception as e:
            logger.error("Failed to list authors", error=str(e))
            raise

    async def get_author(self, author_id: str) -> AuthorRecord:
        """
        Get an author by id.

        Raises:
            NotFoundError: if no author has this id
        """
        object_id = to_object_id(author_id, "author")
        try:
            document = await self.authors.find_one({"_id": object_id})
        except Exception as e:
            logger.error("Failed to get author", author_id=author_id, error=str(e))
            raise
        if document is None:
            raise NotFoundError(f"author {author_id} not found", entity="author")
        return author_from_document(document)

    async def find_author_by_email(self, email: str) -> Optional[AuthorRecord]:
        """Get an author by email, or None."""
        try:
            document = await self.authors.find_one({"email": email})
            return author_from_document(document) if document else None
        except Exception as e:
            logger.error("Failed to get author by email", error=str(e))
            raise

    async def find_author_ids(self, filter_query: Dict[str, Any]) -> List[ObjectId]:
        """Ids of authors matching a filter."""
        try:
            return await self.authors.distinct("_id", filter_query)
        except Exception as e:
            logger.error("Failed to find author ids", error=str(e))
            raise

    async def create_author(self, data: Dict[str, Any]) -> AuthorRecord:
        """
        Insert a new author.

        Raises:
            ConflictError: if the email is already registered
        """
        document = dict(data)
        document["created_at"] = datetime.utcnow()
        try:
            result = await self.authors.insert_one(document)
        except DuplicateKeyError as e:
            logger.warning("Author already exists", email=data.get("email"))
            raise ConflictError("author email already exists", entity="author",
                                field=_duplicate_field(e) or "email")
        except Exception as e:
            logger.error("Failed to insert author", error=str(e))
            raise

        document["_id"] = result.inserted_id
        logger.debug("Successfully inserted author", author_id=str(result.inserted_id))
        return author_from_document(document)

    async def update_author(self, author_id: str, changes: Dict[str, Any]) -> AuthorRecord:
        """
        Apply a partial update to an author.

        Raises:
            NotFoundError: if no author has this id
            ConflictError: if the new email is already registered
        """
        object_id = to_object_id(author_id, "author")
        try:
            if changes:
                document = await self.authors.find_one_and_update(
                    {"_id": object_id},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER
                )
            else:
                document = await self.authors.find_one({"_id": object_id})
        except DuplicateKeyError as e:
            logger.warning("Author email already exists", author_id=author_id)
            raise ConflictError("author email already exists", entity="author",
                                field=_duplicate_field(e) or "email")
        except Exception as e:
            logger.error("Failed to update author", author_id=author_id, error=str(e))
            raise

        if document is None:
            logger.warning("Author not found for update", author_id=author_id)
            raise NotFoundError(f"author {author_id} not found", entity="author")

        logger.debug("Successfully updated author", author_id=author_id)
        return author_from_document(document)

    async def delete_author(self, author_id: str) -> int:
        """
        Delete an author and, in cascade, their books.

        Returns:
            Number of books deleted along with the author

        Raises:
            NotFoundError: if no author has this id
        """
        object_id = to_object_id(author_id, "author")
        try:
            if await self.authors.find_one({"_id": object_id}) is None:
                logger.warning("Author not found for deletion", author_id=author_id)
                raise NotFoundError(f"author {author_id} not found", entity="author")

            # A book never outlives its author.
            books_result = await self.books.delete_many({"author_id": object_id})
            await self.authors.delete_one({"_id": object_id})
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Failed to delete author", author_id=author_id, error=str(e))
            raise

        logger.info("Deleted author", author_id=author_id, books_deleted=books_result.deleted_count)
        return books_result.deleted_count

    async def count_books_by_author(self) -> Dict[str, int]:
        """Book counts keyed by author id."""
        try:
            cursor = self.books.aggregate([
                {"$group": {"_id": "$author_id", "count": {"$sum": 1}}}
            ])
            rows = await cursor.to_list(length=None)
            return {str(row["_id"]): row["count"] for row in rows}
        except Exception as e:
            logger.error("Failed to count books by author", error=str(e))
            raise

    # Books

    async def list_books_by_author(
        self,
        author_id: str,
        sort: Sequence[Tuple[str, int]] = (("published_year", -1),)
    ) -> List[BookRecord]:
        """Books owned by an author."""
        object_id = to_object_id(author_id, "author")
        try:
            cursor = self.books.find({"author_id": object_id}).sort(list(sort))
            documents = await cursor.to_list(length=None)
            return [book_from_document(doc) for doc in documents]
        except Exception as e:
            logger.error("Failed to list author books", author_id=author_id, error=str(e))
            raise

    async def get_book(self, book_id: str) -> BookRecord:
        """
        Get a book by id.

        Raises:
            NotFoundError: if no book has this id
        """
        object_id = to_object_id(book_id, "book")
        try:
            document = await self.books.find_one({"_id": object_id})
        except Exception as e:
            logger.error("Failed to get book", book_id=book_id, error=str(e))
            raise
        if document is None:
            raise NotFoundError(f"book {book_id} not found", entity="book")
        return book_from_document(document)

    async def get_authors_by_ids(self, author_ids: Sequence[str]) -> Dict[str, AuthorRecord]:
        """Authors keyed by id, for attaching owners to a page of books."""
        object_ids = [ObjectId(author_id) for author_id in set(author_ids)]
        if not object_ids:
            return {}
        try:
            cursor = self.authors.find({"_id": {"$in": object_ids}})
            documents = await cursor.to_list(length=None)
            return {str(doc["_id"]): author_from_document(doc) for doc in documents}
        except Exception as e:
            logger.error("Failed to get authors by ids", error=str(e))
            raise

    async def create_book(self, data: Dict[str, Any]) -> BookRecord:
        """
        Insert a new book.

        Raises:
            ConflictError: if the ISBN is already registered
        """
        document = dict(data)
        document["author_id"] = to_object_id(document["author_id"], "author")
        document["created_at"] = datetime.utcnow()
        try:
            result = await self.books.insert_one(document)
        except DuplicateKeyError as e:
            logger.warning("Book ISBN already exists", isbn=data.get("isbn"))
            raise ConflictError("book isbn already exists", entity="book",
                                field=_duplicate_field(e) or "isbn")
        except Exception as e:
            logger.error("Failed to insert book", title=data.get("title"), error=str(e))
            raise

        document["_id"] = result.inserted_id
        logger.debug("Successfully inserted book", book_id=str(result.inserted_id))
        return book_from_document(document)

    async def update_book(self, book_id: str, changes: Dict[str, Any]) -> BookRecord:
        """
        Apply a partial update to a book.

        Raises:
            NotFoundError: if no book has this id
            ConflictError: if the new ISBN is already registered
        """
        object_id = to_object_id(book_id, "book")
        changes = dict(changes)
        if "author_id" in changes:
            changes["author_id"] = to_object_id(changes["author_id"], "author")
        try:
            if changes:
                document = await self.books.find_one_and_update(
                    {"_id": object_id},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER
                )
            else:
                document = await self.books.find_one({"_id": object_id})
        except DuplicateKeyError as e:
            logger.warning("Book ISBN already exists", book_id=book_id)
            raise ConflictError("book isbn already exists", entity="book",
                                field=_duplicate_field(e) or "isbn")
        except Exception as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise

        if document is None:
            logger.warning("Book not found for update", book_id=book_id)
            raise NotFoundError(f"book {book_id} not found", entity="book")

        logger.debug("Successfully updated book", book_id=book_id)
        return book_from_document(document)

    async def delete_book(self, book_id: str) -> None:
        """
        Delete a book.

        Raises:
            NotFoundError: if no book has this id
        """
        object_id = to_object_id(book_id, "book")
        try:
            result = await self.books.delete_one({"_id": object_id})
        except Exception as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise

        if result.deleted_count == 0:
            logger.warning("Book not found for deletion", book_id=book_id)
            raise NotFoundError(f"book {book_id} not found", entity="book")
        logger.debug("Successfully deleted book", book_id=book_id)

    async def count_books(self, filter_query: Dict[str, Any]) -> int:
        """Number of books matching a filter."""
        try:
            return await self.books.count_documents(filter_query)
        except Exception as e:
            logger.error("Failed to count books", error=str(e))
            raise

    async def find_books(
        self,
        filter_query: Dict[str, Any],
        sort: Sequence[Tuple[str, int]],
        skip: int,
        limit: int
    ) -> List[BookRecord]:
        """A window of books matching a filter."""
        try:
            cursor = self.books.find(filter_query).sort(list(sort)).skip(skip).limit(limit)
            documents = await cursor.to_list(length=limit)
            return [book_from_document(doc) for doc in documents]
        except Exception as e:
            logger.error("Failed to find books", error=str(e))
            raise
