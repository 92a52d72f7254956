"""Option catalog: assembly -> tissues -> supported algorithms.

The catalog normally comes from ``GET /api/tissues``. Deployments that ship
the catalog with the client can instead point ``ENHANCER_GENIE_CATALOG_FILE``
at a flat CSV/XLSX table, one row per (assembly, tissue, algorithm).
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..core.errors import CatalogError
from .models import AlgorithmOption, AssemblyOption, TissueOption

logger = logging.getLogger(__name__)

ASSEMBLY_STD = "ASSEMBLY"
TISSUE_STD = "TISSUE"
TISSUE_LABEL_STD = "TISSUE_LABEL"
ALGORITHM_STD = "ALGORITHM"
ALGORITHM_LABEL_STD = "ALGORITHM_LABEL"

COL_NAME_VARIATIONS: Dict[str, Iterable[str]] = {
    ASSEMBLY_STD: ["ASSEMBLY", "GENOME", "GENOME ASSEMBLY", "BUILD"],
    TISSUE_STD: ["TISSUE", "ORGAN", "TISSUE ID", "CELL TYPE"],
    TISSUE_LABEL_STD: ["TISSUE LABEL", "TISSUE NAME", "ORGAN LABEL"],
    ALGORITHM_STD: ["ALGORITHM", "METHOD", "ALGORITHM ID"],
    ALGORITHM_LABEL_STD: ["ALGORITHM LABEL", "ALGORITHM NAME", "METHOD NAME"],
}

REQUIRED_COLUMNS = (ASSEMBLY_STD, TISSUE_STD, ALGORITHM_STD)


def _normalise_header(value: Any) -> str:
    if value is None:
        return ""
    return re.sub(r"[^A-Z0-9]", "", str(value).strip().upper())


def build_column_mapping(columns: Iterable[str]) -> Dict[str, str]:
    """Return a mapping of canonical column names to the actual column titles."""
    mapping: Dict[str, str] = {}
    normalised_lookup: Dict[str, str] = {}
    for original in columns:
        key = _normalise_header(original)
        if key and key not in normalised_lookup:
            normalised_lookup[key] = original

    for canonical, variations in COL_NAME_VARIATIONS.items():
        for variation in variations:
            normalised_variation = _normalise_header(variation)
            if normalised_variation in normalised_lookup:
                mapping[canonical] = normalised_lookup[normalised_variation]
                break
    return mapping


def _clean(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


class OptionCatalog:
    """Immutable, ordered lookup over the assembly/tissue/algorithm table."""

    def __init__(self, assemblies: Sequence[AssemblyOption]):
        self._assemblies: Tuple[AssemblyOption, ...] = tuple(assemblies)
        self._by_id: Dict[str, AssemblyOption] = {}
        for option in self._assemblies:
            if option.assembly in self._by_id:
                raise CatalogError(f"Duplicate assembly in catalog: {option.assembly}")
            self._by_id[option.assembly] = option

    # ------------------------------------------------------------------
    # Construction

    @classmethod
    def from_payload(cls, payload: Any) -> "OptionCatalog":
        """Parse the JSON body returned by the tissues endpoint."""
        if not isinstance(payload, list):
            raise CatalogError("Catalog payload must be a list of assemblies")

        assemblies: List[AssemblyOption] = []
        for raw_assembly in payload:
            try:
                assembly_id = _clean(raw_assembly["assembly"])
                raw_tissues = raw_assembly.get("tissues") or []
                tissues = []
                for raw_tissue in raw_tissues:
                    algorithms = tuple(
                        AlgorithmOption(value=_clean(algo["value"]), label=_clean(algo.get("label")))
                        for algo in (raw_tissue.get("supportedAlgorithms") or [])
                    )
                    tissues.append(
                        TissueOption(
                            value=_clean(raw_tissue["value"]),
                            label=_clean(raw_tissue.get("label")),
                            supported_algorithms=algorithms,
                        )
                    )
            except (KeyError, TypeError, AttributeError) as exc:
                raise CatalogError(f"Malformed catalog entry: {raw_assembly!r}") from exc
            if not assembly_id:
                raise CatalogError("Catalog entry without assembly id")
            assemblies.append(AssemblyOption(assembly=assembly_id, tissues=tuple(tissues)))

        logger.info("Loaded option catalog with %d assemblies", len(assemblies))
        return cls(assemblies)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "OptionCatalog":
        """Build a catalog from a flat table, keeping first-seen row order."""
        mapping = build_column_mapping(df.columns)
        missing = [col for col in REQUIRED_COLUMNS if col not in mapping]
        if missing:
            raise CatalogError(f"Catalog table is missing columns: {', '.join(missing)}")

        df = df.rename(columns={original: canonical for canonical, original in mapping.items()})

        # assembly -> tissue -> (label, {algorithm: label})
        tree: Dict[str, Dict[str, Tuple[str, Dict[str, str]]]] = {}
        for _, row in df.iterrows():
            assembly_id = _clean(row[ASSEMBLY_STD])
            tissue_id = _clean(row[TISSUE_STD])
            if not assembly_id or not tissue_id:
                logger.debug("Skipping catalog row without assembly/tissue: %s", row.to_dict())
                continue
            tissue_label = _clean(row.get(TISSUE_LABEL_STD)) or tissue_id
            tissues = tree.setdefault(assembly_id, {})
            _, algorithms = tissues.setdefault(tissue_id, (tissue_label, {}))
            algorithm_id = _clean(row[ALGORITHM_STD])
            if algorithm_id and algorithm_id not in algorithms:
                algorithms[algorithm_id] = _clean(row.get(ALGORITHM_LABEL_STD)) or algorithm_id

        assemblies = [
            AssemblyOption(
                assembly=assembly_id,
                tissues=tuple(
                    TissueOption(
                        value=tissue_id,
                        label=label,
                        supported_algorithms=tuple(
                            AlgorithmOption(value=algo_id, label=algo_label)
                            for algo_id, algo_label in algorithms.items()
                        ),
                    )
                    for tissue_id, (label, algorithms) in tissues.items()
                ),
            )
            for assembly_id, tissues in tree.items()
        ]
        return cls(assemblies)

    @classmethod
    def from_table(cls, path: Union[str, Path]) -> "OptionCatalog":
        """Load a catalog from a CSV or Excel file."""
        path = Path(path)
        if not path.exists():
            raise CatalogError(f"Catalog file not found: {path}")
        try:
            if path.suffix.lower() == ".xlsx":
                df = pd.read_excel(path, dtype=str)
            else:
                df = pd.read_csv(path, dtype=str)
        except Exception as exc:
            raise CatalogError(f"Could not read catalog file {path}: {exc}") from exc
        logger.info("Reading option catalog from %s (%d rows)", path, len(df))
        return cls.from_dataframe(df)

    # ------------------------------------------------------------------
    # Lookups

    @property
    def assemblies(self) -> Tuple[AssemblyOption, ...]:
        return self._assemblies

    def assembly_ids(self) -> Tuple[str, ...]:
        return tuple(option.assembly for option in self._assemblies)

    def get_assembly(self, assembly_id: str) -> Optional[AssemblyOption]:
        return self._by_id.get(assembly_id)

    def has_assembly(self, assembly_id: str) -> bool:
        return assembly_id in self._by_id

    def tissues_for(self, assembly_id: str) -> Tuple[TissueOption, ...]:
        option = self._by_id.get(assembly_id)
        return option.tissues if option else ()

    def get_tissue(self, assembly_id: str, tissue_id: str) -> Optional[TissueOption]:
        option = self._by_id.get(assembly_id)
        return option.get_tissue(tissue_id) if option else None

    def algorithms_for(self, assembly_id: str, tissue_id: str) -> Tuple[AlgorithmOption, ...]:
        tissue = self.get_tissue(assembly_id, tissue_id)
        return tissue.supported_algorithms if tissue else ()

    def __len__(self) -> int:
        return len(self._assemblies)

    def __iter__(self):
        return iter(self._assemblies)
