"""External data sources."""

from cosmicparticles.io.ai_molecule import (
    MoleculeFetchError,
    MoleculeValidationError,
    fetch_molecule,
    validate_molecule,
    validate_query,
)

__all__ = [
    "MoleculeFetchError",
    "MoleculeValidationError",
    "fetch_molecule",
    "validate_molecule",
    "validate_query",
]
