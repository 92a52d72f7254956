"""Data models for the Enhancer Genie client."""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


ASSEMBLY_LABELS = {
    "GRCh38": "Human GRCh38/hg38",
    "GRCh37": "Human GRCh37/hg19",
}


@dataclass(frozen=True)
class AlgorithmOption:
    """An interaction prediction method. Compared by ``value`` only."""
    value: str
    label: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", self.value)


@dataclass(frozen=True)
class TissueOption:
    """A tissue under one assembly, with the algorithms it supports."""
    value: str
    label: str = ""
    supported_algorithms: Tuple[AlgorithmOption, ...] = ()

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", self.value)

    @property
    def algorithm_ids(self) -> Tuple[str, ...]:
        return tuple(algo.value for algo in self.supported_algorithms)

    def supports(self, algorithm_id: str) -> bool:
        return algorithm_id in self.algorithm_ids


@dataclass(frozen=True)
class AssemblyOption:
    """A reference genome version and its tissues."""
    assembly: str
    tissues: Tuple[TissueOption, ...] = ()

    @property
    def label(self) -> str:
        return ASSEMBLY_LABELS.get(self.assembly, self.assembly)

    @property
    def tissue_ids(self) -> Tuple[str, ...]:
        return tuple(tissue.value for tissue in self.tissues)

    def get_tissue(self, tissue_id: str) -> Optional[TissueOption]:
        for tissue in self.tissues:
            if tissue.value == tissue_id:
                return tissue
        return None


@dataclass(frozen=True)
class SelectionState:
    """Current (assembly, tissue, algorithms) triple. Empty fields are ``""``."""
    assembly: str = ""
    tissue: str = ""
    algorithms: FrozenSet[str] = frozenset()

    def replace(self, **changes) -> "SelectionState":
        values = {
            "assembly": self.assembly,
            "tissue": self.tissue,
            "algorithms": self.algorithms,
        }
        values.update(changes)
        values["algorithms"] = frozenset(values["algorithms"])
        return SelectionState(**values)

    @property
    def is_empty(self) -> bool:
        return not (self.assembly or self.tissue or self.algorithms)


@dataclass(frozen=True)
class HistoryEntry:
    """One past analysis kept in the browser's durable storage."""
    fingerprint: str
    timestamp: str


@dataclass
class UploadRequest:
    """Everything the upload workflow sends to ``POST upload``."""
    organ: str
    assembly: str
    algorithms: Tuple[AlgorithmOption, ...]
    email: str = ""
    file_name: Optional[str] = None
    file_bytes: Optional[bytes] = None


@dataclass
class CheckRequest:
    """Coordinates for the single enhancer/gene check workflow."""
    enhancer_start: str = ""
    enhancer_stop: str = ""
    gene_position: str = ""


@dataclass
class UploadResult:
    fingerprint: str
    result: object = None

    @property
    def route(self) -> str:
        return f"/chart_results/{self.fingerprint}"


@dataclass
class CheckResult:
    interacts: str
    where: Optional[str] = None
