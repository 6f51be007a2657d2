"""Document store collaborator.

We do not implement a storage backend here. Anything that can
write and read flat documents by (collection, key) will do,
e.g. a thin wrapper around a Firestore client.

Records always go through :py:meth:`ammstats.persistence.PersistentRecord.pre_save`
before they are written and :py:meth:`ammstats.persistence.PersistentRecord.after_load`
after they are read. Storage errors propagate to the caller.
"""
import logging
from typing import Any, Dict, Optional, Protocol, Type, TypeVar

from ammstats.exceptions import RecordNotFound
from ammstats.persistence import PersistentRecord


logger = logging.getLogger(__name__)


#: A stored document: field name -> string or primitive scalar
Document = Dict[str, Any]


R = TypeVar("R", bound=PersistentRecord)


class DocumentStore(Protocol):
    """Key based document storage."""

    def set_document(self, collection: str, key: str, document: Document):
        """Write or overwrite a document."""

    def get_document(self, collection: str, key: str) -> Optional[Document]:
        """Read a document, `None` if it does not exist."""


def save_record(store: DocumentStore, record: PersistentRecord) -> str:
    """Encode and write a record.

    :return:
        Key of the written document
    """
    document = record.pre_save()
    key = record.get_storage_key()
    store.set_document(record.collection, key, document)
    logger.debug("Saved %s/%s", record.collection, key)
    return key


def load_record(store: DocumentStore, record_class: Type[R], key: str) -> R:
    """Read and decode a record.

    Check :py:attr:`PersistentRecord.status` of the result,
    damaged documents are loaded with zero values.

    :raise RecordNotFound:
        No document with the key
    """
    document = store.get_document(record_class.collection, key)
    if document is None:
        raise RecordNotFound(record_class.collection, key)
    return record_class.after_load(document)
