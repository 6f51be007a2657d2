"""Keep native and stored presentation of records in sync.

Our document store cannot hold :py:class:`decimal.Decimal`, so every
record has two presentations

- Native: dataclass attributes with :py:class:`decimal.Decimal` amounts and
  lowercase addresses. All computation happens on these.

- Stored: a flat dict of strings and primitive scalars, produced by :py:meth:`PersistentRecord.pre_save`.
  This is the only thing the storage sees.

Each persisted attribute declares its stored field name with
:py:func:`decimal_field`, :py:func:`address_field` or :py:func:`plain_field`.
The stored field name doubles as the JSON field name of the record.

.. warning::

    Stored field names are a storage schema. Renaming one orphans
    all data already written under the old name.

Example:

.. code-block:: python

    document = token.pre_save()
    store.set_document(Token.collection, token.get_storage_key(), document)

    # ... later
    token = Token.after_load(store.get_document(Token.collection, key))
    if token.status != RecordStatus.ok:
        logger.warning("Got bad token %s, fields %s", token, token.degraded_fields)
"""
import enum
import logging
from dataclasses import dataclass, field, fields, Field, MISSING
from typing import Any, Callable, ClassVar, Dict, Iterable, Set, Tuple, Type, TypeVar

from dataclasses_json import config, Exclude

from ammstats.codec import decode_address, decode_decimal, encode_address, encode_decimal, DECIMAL_ZERO


logger = logging.getLogger(__name__)


#: Dataclass field metadata key for our storage information
STORAGE_METADATA_KEY = "ammstats_storage"


class FieldKind(enum.Enum):
    """How a native value is converted for the storage."""

    #: :py:class:`Decimal` stored as string
    decimal = "decimal"

    #: Lowercase address stored as checksummed string
    address = "address"

    #: Store native scalars (str, int, datetime) as is
    plain = "plain"

    #: :py:class:`RecordStatus` stored as its string value
    status = "status"


class RecordStatus(enum.Enum):
    """Can downstream consumers trust the record."""

    #: Everything decoded and was valued
    ok = "ok"

    #: One or more stored fields could not be decoded and were replaced with zero values.
    #: See :py:attr:`PersistentRecord.degraded_fields`.
    degraded = "degraded"

    #: Valuation could not be derived: no anchor token or no liquidity.
    #: USD fields are zero. Totals that left such records out are also unpriced.
    unpriced = "unpriced"

    #: Stored volume does not match stored flows
    inconsistent = "inconsistent"


@dataclass(frozen=True, slots=True)
class StoredField:
    """Storage information of one dataclass field."""

    #: Field name in the stored document
    stored_as: str

    kind: FieldKind

    #: Value used when a plain field is missing from a stored document
    fallback: Any = None

    #: Plain field where a stored `None` is a legitimate value
    nullable: bool = False


def _storage_field(stored_as: str, kind: FieldKind, default=MISSING, default_factory=MISSING, fallback=None) -> Any:
    metadata = dict(config(field_name=stored_as))
    metadata[STORAGE_METADATA_KEY] = StoredField(stored_as, kind, fallback, nullable=default is None)
    return field(default=default, default_factory=default_factory, metadata=metadata)


def decimal_field(stored_as: str) -> Any:
    """Declare a :py:class:`Decimal` attribute that is stored as a string.

    Defaults to zero.
    """
    return _storage_field(stored_as, FieldKind.decimal, default=DECIMAL_ZERO)


def address_field(stored_as: str, default=MISSING) -> Any:
    """Declare an address attribute that is stored in checksummed format."""
    return _storage_field(stored_as, FieldKind.address, default=default)


def plain_field(stored_as: str, default=MISSING, fallback=None) -> Any:
    """Declare an attribute the storage can hold natively.

    A `None` default makes `None` a valid stored value.

    :param fallback:
        Value used when the field is missing from a stored document
    """
    return _storage_field(stored_as, FieldKind.plain, default=default, fallback=fallback)


def iterate_stored_fields(cls: type) -> Iterable[Tuple[Field, StoredField]]:
    """Iterate all dataclass fields that have a stored presentation."""
    for f in fields(cls):
        stored = f.metadata.get(STORAGE_METADATA_KEY)
        if stored is not None:
            yield f, stored


def _encode_plain(value: Any) -> Any:
    return value


def _encode_status(value: RecordStatus) -> str:
    return value.value


def _decode_plain(value: Any, stored: StoredField, present: bool) -> Tuple[Any, bool]:
    if value is None:
        if present and stored.nullable:
            return None, True
        return stored.fallback, False
    return value, True


def _decode_status(value: Any, stored: StoredField, present: bool) -> Tuple[RecordStatus, bool]:
    # Documents written before status was stored
    if value is None:
        return RecordStatus.ok, True
    try:
        return RecordStatus(value), True
    except ValueError:
        return RecordStatus.degraded, False


_ENCODERS: Dict[FieldKind, Callable[[Any], Any]] = {
    FieldKind.decimal: encode_decimal,
    FieldKind.address: encode_address,
    FieldKind.plain: _encode_plain,
    FieldKind.status: _encode_status,
}


_DECODERS: Dict[FieldKind, Callable[[Any, StoredField, bool], Tuple[Any, bool]]] = {
    FieldKind.decimal: lambda v, s, present: decode_decimal(v),
    FieldKind.address: lambda v, s, present: decode_address(v),
    FieldKind.plain: _decode_plain,
    FieldKind.status: _decode_status,
}


R = TypeVar("R", bound="PersistentRecord")


@dataclass(kw_only=True)
class PersistentRecord:
    """Base class for all records that go to the document store.

    Subclasses are dataclasses that declare their persisted attributes with
    :py:func:`decimal_field`, :py:func:`address_field` and :py:func:`plain_field`.
    """

    #: Document store collection where the records of this type are written
    collection: ClassVar[str]

    #: Is this record fully valid
    status: RecordStatus = field(
        default=RecordStatus.ok,
        metadata={**config(field_name="status"), STORAGE_METADATA_KEY: StoredField("status", FieldKind.status)},
    )

    #: Stored field names that failed to decode in :py:meth:`after_load`
    degraded_fields: Set[str] = field(default_factory=set, compare=False, metadata=config(exclude=Exclude.ALWAYS))

    #: The last stored presentation, written by :py:meth:`pre_save` or read by :py:meth:`after_load`
    encoded: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False, metadata=config(exclude=Exclude.ALWAYS))

    def get_storage_key(self) -> str:
        """Document key of this record in its collection."""
        raise NotImplementedError()

    def is_valid(self) -> bool:
        """Can this record be treated as authoritative."""
        return self.status == RecordStatus.ok

    def before_encode(self):
        """Subclass hook run by :py:meth:`pre_save` before anything is encoded.

        Raise to refuse the write.
        """

    def after_decode(self):
        """Subclass hook run by :py:meth:`after_load` after the native fields are set."""

    def pre_save(self) -> Dict[str, Any]:
        """Project native attributes to the stored presentation.

        Must be called right before the record is handed to the storage.

        :return:
            Document containing only stored field names.
            Also available as :py:attr:`encoded`.
        """
        self.before_encode()
        document = {}
        for f, stored in iterate_stored_fields(type(self)):
            value = getattr(self, f.name)
            document[stored.stored_as] = _ENCODERS[stored.kind](value)
        self.encoded = document
        return document

    @classmethod
    def after_load(cls: Type[R], document: Dict[str, Any]) -> R:
        """Hydrate a record from its stored presentation.

        Fields that fail to decode get zero values. The record is then flagged
        :py:attr:`RecordStatus.degraded` and the failed fields are listed in
        :py:attr:`degraded_fields`.

        Only the document itself is used. Links to other records, like
        pair tokens, are left for the caller to resolve.
        """
        kwargs = {}
        degraded = set()
        for f, stored in iterate_stored_fields(cls):
            raw = document.get(stored.stored_as)
            value, success = _DECODERS[stored.kind](raw, stored, stored.stored_as in document)
            if not success:
                logger.warning("Could not decode %s field %s, stored value %r", cls.__name__, stored.stored_as, raw)
                degraded.add(stored.stored_as)
            kwargs[f.name] = value

        record = cls(**kwargs)
        record.encoded = dict(document)
        record.degraded_fields = degraded
        if degraded:
            record.status = RecordStatus.degraded
        record.after_decode()
        return record
