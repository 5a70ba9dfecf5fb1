"""Base class for stored entity records."""

from types import MappingProxyType
from typing import Annotated, ClassVar, Mapping

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer

FrozenLabels = Annotated[
    Mapping[str, str],
    AfterValidator(lambda value: MappingProxyType(dict(value))),
    PlainSerializer(dict, return_type=dict[str, str]),
]


class Record(BaseModel):
    """Immutable entity record keyed by an opaque string id.

    Set-valued fields are frozensets, ordered collections are tuples and
    label maps are read-only mapping proxies, so a record handed to a reader
    cannot be changed by a later mutation. Updates go through
    ``model_copy(update=...)`` or ``UnitOfWork.update`` and produce a new
    record.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: ClassVar[str] = ""

    id: str
