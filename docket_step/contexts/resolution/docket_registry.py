import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from omegaconf import OmegaConf

from docket_step.contexts.resolution.exceptions import DocketNotFoundError
from docket_step.contexts.resolution.job_data_structures import DocketTemplate

load_dotenv()
DOCKET_CATALOG = Path(os.getenv("DOCKET_CATALOG", "config/dockets.yaml"))


class DocketRegistry:
    """
    Registry of named docket templates, loaded from a YAML catalog.

    The catalog is read lazily and cached until reload(); ConfigResolver calls
    reload() before each validate/resolve.

    Catalog format:

        dockets:
          - id: 1
            name: docket-default
            file: docket.xsl
          - id: 2
            name: docket-multipage
            file: docket_multipage.xsl

    Template files are relative to the templates root; joining them is left to
    the config resolver.
    """

    def __init__(self, catalog_path: Path = None):
        """
        Initialize the docket registry.

        Args:
            catalog_path: Path to the YAML catalog. Defaults to DOCKET_CATALOG
                          from environment
        """
        if catalog_path is None:
            catalog_path = DOCKET_CATALOG

        self.catalog_path = Path(catalog_path)
        self._cache: Optional[List[DocketTemplate]] = None

    def _load(self) -> List[DocketTemplate]:
        if self._cache is not None:
            return self._cache

        try:
            catalog = OmegaConf.to_container(OmegaConf.load(self.catalog_path), resolve=True)
            if not isinstance(catalog, dict):
                raise ValueError("catalog root must be a mapping with a 'dockets' list")

            entries: List[Dict[str, Any]] = catalog.get("dockets") or []
            dockets = [
                DocketTemplate(
                    id=int(entry["id"]), name=str(entry["name"]), file=str(entry["file"])
                )
                for entry in entries
            ]
        except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError) as e:
            raise DocketNotFoundError(
                f"Could not read docket catalog at {self.catalog_path}: {e}"
            ) from e

        self._cache = dockets
        return self._cache

    def get_by_name(self, name: str) -> DocketTemplate:
        """
        Get a docket by its name.

        Raises:
            DocketNotFoundError: If no docket has this name or the catalog is unreadable
        """
        for docket in self._load():
            if docket.name == name:
                return docket
        raise DocketNotFoundError(f"No docket named '{name}' in {self.catalog_path}")

    def get_by_id(self, docket_id: int) -> DocketTemplate:
        """
        Get a docket by its numeric id.

        Raises:
            DocketNotFoundError: If no docket has this id or the catalog is unreadable
        """
        for docket in self._load():
            if docket.id == docket_id:
                return docket
        raise DocketNotFoundError(f"No docket with id {docket_id} in {self.catalog_path}")

    def list_dockets(self) -> List[DocketTemplate]:
        """All dockets in catalog order."""
        return list(self._load())

    def reload(self):
        """Drop the cached catalog so the next lookup re-reads the file."""
        self._cache = None

    def is_loaded(self) -> bool:
        return self._cache is not None
