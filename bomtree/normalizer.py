from typing import List, Dict, Any, Optional, Iterable
import re
from .schema import COLUMN_MAPPINGS


class ColumnResolver:
    """Resolves the actual headers of a table to well-known column keys.

    Headers are never renamed: records keep their source column names and
    only the handful of keys the explosion needs are looked up here.
    """

    def __init__(self, configured: Dict[str, str], mappings: Optional[Dict[str, List[str]]] = None):
        """Initialize the resolver.

        Args:
            configured: Well-known key -> preferred header name
            mappings: Alias table (default: schema.COLUMN_MAPPINGS)
        """
        self.configured = dict(configured)
        mappings = COLUMN_MAPPINGS if mappings is None else mappings

        # key -> set of normalized names accepted for that key
        self._variations = {}
        for key, name in self.configured.items():
            variations = {self.normalize_column_name(name)}
            for alias in mappings.get(key, []):
                variations.add(self.normalize_column_name(alias))
            variations.discard("")
            self._variations[key] = variations

    @staticmethod
    def normalize_column_name(column_name: Any) -> str:
        """Lowercase a header and collapse spaces, underscores and hyphens."""
        if column_name is None:
            return ""
        return re.sub(r'[\s_\-]+', ' ', str(column_name).lower().strip())

    def resolve(self, headers: Iterable[Any]) -> Dict[str, str]:
        """Map each well-known key to the header that carries it.

        An exact match on the configured name wins over an alias match, and
        a header is never assigned to more than one key.

        Args:
            headers: Table headers in source order

        Returns:
            Dictionary of key -> header for every key that could be resolved
        """
        headers = [h for h in headers if h is not None]
        resolved = {}
        used = set()

        for key, name in self.configured.items():
            if name in headers and name not in used:
                resolved[key] = name
                used.add(name)

        for key in self.configured:
            if key in resolved:
                continue
            for header in headers:
                if header in used:
                    continue
                if self.normalize_column_name(header) in self._variations[key]:
                    resolved[key] = header
                    used.add(header)
                    break

        return resolved

    def get_mapping_report(self, headers: Iterable[Any]) -> Dict[str, Any]:
        """Generate a report of column mappings for debugging.

        Args:
            headers: Table headers in source order

        Returns:
            Dictionary with the resolved keys and the pass-through headers
        """
        headers = list(headers)
        resolved = self.resolve(headers)
        mapped_headers = set(resolved.values())
        return {
            "mapped": resolved,
            "unmapped": [h for h in headers if h not in mapped_headers],
            "unresolved_keys": [key for key in self.configured if key not in resolved],
        }
