"""Data models for parsed GenBank records."""

from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class Division(Enum):
    """GenBank division codes accepted on the LOCUS line."""

    PRI = "PRI"  # primate
    ROD = "ROD"  # rodent
    MAM = "MAM"  # other mammalian
    VRT = "VRT"  # other vertebrate
    INV = "INV"  # invertebrate
    PLN = "PLN"  # plant, fungal and algal
    BCT = "BCT"  # bacterial
    VRL = "VRL"  # viral
    PHG = "PHG"  # bacteriophage
    SYN = "SYN"  # synthetic
    UNA = "UNA"  # unannotated
    EST = "EST"  # expressed sequence tags
    PAT = "PAT"  # patent
    STS = "STS"  # sequence tagged sites
    GSS = "GSS"  # genome survey sequences
    HTG = "HTG"  # high-throughput genomic
    HTC = "HTC"  # high-throughput cDNA
    ENV = "ENV"  # environmental sampling


@dataclass(frozen=True)
class Locus:
    """Fields of the LOCUS line."""

    accession: str
    sequence_length: int
    molecule_type: str
    division: Division
    modification_date: date
    length_unit: str = "bp"


@dataclass(frozen=True)
class Reference:
    """One REFERENCE block."""

    number: int
    authors: Tuple[str, ...]
    title: str
    journal: str
    pubmed: Optional[int] = None
    note: Optional[str] = None
    remark: Optional[str] = None


@dataclass(frozen=True)
class Feature:
    """One entry of the feature table."""

    name: str
    location: str
    qualifiers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'qualifiers', MappingProxyType(dict(self.qualifiers)))

    def __hash__(self) -> int:
        return hash((self.name, self.location, frozenset(self.qualifiers.items())))

    def get(self, qualifier: str, default: Optional[str] = None) -> Optional[str]:
        """Get a qualifier value."""
        return self.qualifiers.get(qualifier, default)


@dataclass(frozen=True)
class GenbankRecord:
    """A fully parsed GenBank record.

    Instances are immutable values; use ``to_dict`` for the plain mapping
    form, which also surfaces the promoted qualifiers (``MOL_TYPE``,
    ``STRAIN``, ...) as top-level keys.
    """

    accession: str
    locus: Locus
    version_entries: Tuple[str, ...] = ()
    definition: str = ""
    keywords: Tuple[str, ...] = ()
    source: str = ""
    organism: str = ""
    classification: Tuple[str, ...] = ()
    references: Tuple[Reference, ...] = ()
    features: Tuple[Feature, ...] = ()
    promoted_attributes: Mapping[str, str] = field(default_factory=dict)
    ncbi_taxon_id: Optional[str] = None
    origin_raw: str = ""
    sequence: str = ""
    comment: Optional[str] = None
    dblink: Tuple[str, ...] = ()
    base_count: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        # Mapping fields are read-only views over private copies
        object.__setattr__(self, 'promoted_attributes', MappingProxyType(dict(self.promoted_attributes)))
        object.__setattr__(self, 'base_count', MappingProxyType(dict(self.base_count)))

    def __hash__(self) -> int:
        return hash((self.accession, self.locus, self.references, self.features, self.sequence))

    def __getitem__(self, key: str) -> Any:
        if key in self.promoted_attributes:
            return self.promoted_attributes[key]
        if key not in self.field_names():
            raise KeyError(key)
        return getattr(self, key)

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def features_named(self, name: str) -> Tuple[Feature, ...]:
        """Get all features with the given name (e.g. ``CDS``)."""
        return tuple(feature for feature in self.features if feature.name == name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to plain dictionaries, lists and scalars."""
        data: Dict[str, Any] = {
            'accession': self.accession,
            'version_entries': list(self.version_entries),
            'locus': {
                'accession': self.locus.accession,
                'sequence_length': self.locus.sequence_length,
                'length_unit': self.locus.length_unit,
                'molecule_type': self.locus.molecule_type,
                'division': self.locus.division.value,
                'modification_date': self.locus.modification_date,
            },
            'definition': self.definition,
            'keywords': list(self.keywords),
            'source': self.source,
            'organism': self.organism,
            'classification': list(self.classification),
            'references': [
                {
                    'number': ref.number,
                    'authors': list(ref.authors),
                    'title': ref.title,
                    'journal': ref.journal,
                    'pubmed': ref.pubmed,
                    'note': ref.note,
                    'remark': ref.remark,
                }
                for ref in self.references
            ],
            'features': [
                {
                    'name': feature.name,
                    'location': feature.location,
                    'qualifiers': dict(feature.qualifiers),
                }
                for feature in self.features
            ],
            'promoted_attributes': dict(self.promoted_attributes),
            'ncbi_taxon_id': self.ncbi_taxon_id,
            'origin_raw': self.origin_raw,
            'sequence': self.sequence,
            'comment': self.comment,
            'dblink': list(self.dblink),
            'base_count': dict(self.base_count),
        }
        data.update(self.promoted_attributes)
        return data
