"""
Custom molecule client.

Asks a chat-completions model (through OpenRouter) for a molecule's 3D
structure as JSON, then validates it strictly before it can reach the
molecule generator.
"""

import json
import logging
import math
import re
from numbers import Real
from typing import Any, Optional

import requests

from cosmicparticles.generators.molecules import Atom, Bond, BondKind, Molecule

logger = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "google/gemini-pro-1.5"
REQUEST_TIMEOUT = 30.0

MAX_QUERY_LENGTH = 100
MAX_ATOMS = 256
MAX_BONDS = 512

_QUERY_PATTERN = re.compile(r"^[A-Za-z0-9 ,()\[\]'+\-]+$")
_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)

PROMPT_TEMPLATE = """
Generate a JSON object for the molecule '{query}'. The object focuses on its 3D position.
The center of each atom should reflect the spatial relationship of the true structure of the molecule.
The JSON must follow this exact schema:
{{
  "name": "Molecule Name",
  "atoms": [
    {{ "element": "Symbol", "pos": [x, y, z] }}
  ],
  "bonds": [
    [index1, index2, order, type]
  ]
}}

Rules:
1. "pos" must be an array of 3 numbers (x, y, z) in Angstroms.
2. "element" must be the standard chemical symbol (e.g., "C", "H", "O").
3. "bonds" must be an array of arrays. Each inner array contains:
   - index1: Index of the first atom (0-based).
   - index2: Index of the second atom (0-based).
   - order: Bond order (1 for single, 2 for double, 3 for triple).
   - type: Bond type ("covalent" or "ionic").
4. Center the molecule at [0, 0, 0].
5. Provide accurate 3D geometry (bond lengths and angles).
6. Return ONLY the JSON object, no markdown formatting or extra text.
"""


class MoleculeValidationError(ValueError):
    """Query text or returned structure is not acceptable."""


class MoleculeFetchError(RuntimeError):
    """The model service could not be reached or answered unusably."""


def validate_query(text: Any) -> str:
    """Return the stripped query, or raise MoleculeValidationError."""
    if not isinstance(text, str) or not text.strip():
        raise MoleculeValidationError("Molecule name is required.")
    query = text.strip()
    if len(query) > MAX_QUERY_LENGTH:
        raise MoleculeValidationError(
            f"Molecule name is too long ({len(query)} > {MAX_QUERY_LENGTH} characters)."
        )
    if not _QUERY_PATTERN.match(query):
        raise MoleculeValidationError("Molecule name contains unsupported characters.")
    return query


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_molecule(data: Any) -> Molecule:
    """
    Check an untrusted structure and convert it to a Molecule.

    Raises:
        MoleculeValidationError: with the first problem found.
    """
    if not isinstance(data, dict):
        raise MoleculeValidationError("Invalid data format: expected a JSON object")

    raw_atoms = data.get("atoms")
    if not isinstance(raw_atoms, list) or not raw_atoms:
        raise MoleculeValidationError("Invalid data format: missing atoms array")
    if len(raw_atoms) > MAX_ATOMS:
        raise MoleculeValidationError(f"Too many atoms ({len(raw_atoms)} > {MAX_ATOMS})")

    atoms = []
    for i, atom in enumerate(raw_atoms):
        if not isinstance(atom, dict):
            raise MoleculeValidationError(f"Atom {i} is not an object")
        element = atom.get("element")
        if not isinstance(element, str) or not element.strip():
            raise MoleculeValidationError(f"Atom {i} has no element symbol")
        pos = atom.get("pos")
        if not isinstance(pos, (list, tuple)) or len(pos) != 3 or not all(_is_number(v) for v in pos):
            raise MoleculeValidationError(f"Atom {i} position must be 3 finite numbers")
        atoms.append(Atom(element.strip(), tuple(float(v) for v in pos)))

    raw_bonds = data.get("bonds", [])
    if raw_bonds is None:
        raw_bonds = []
    if not isinstance(raw_bonds, list):
        raise MoleculeValidationError("Invalid data format: bonds must be an array")
    if len(raw_bonds) > MAX_BONDS:
        raise MoleculeValidationError(f"Too many bonds ({len(raw_bonds)} > {MAX_BONDS})")

    bonds = []
    for i, bond in enumerate(raw_bonds):
        if not isinstance(bond, (list, tuple)) or not 2 <= len(bond) <= 4:
            raise MoleculeValidationError(f"Bond {i} must be [index1, index2, order?, type?]")
        a, b = bond[0], bond[1]
        if not (_is_index(a) and _is_index(b)):
            raise MoleculeValidationError(f"Bond {i} indices must be integers")
        if not (0 <= a < len(atoms) and 0 <= b < len(atoms)):
            raise MoleculeValidationError(f"Bond {i} references a missing atom")
        if a == b:
            raise MoleculeValidationError(f"Bond {i} connects atom {a} to itself")

        order = bond[2] if len(bond) > 2 and bond[2] is not None else 1
        if not _is_index(order) or order not in (1, 2, 3):
            raise MoleculeValidationError(f"Bond {i} order must be 1, 2 or 3")

        kind = bond[3] if len(bond) > 3 and bond[3] is not None else BondKind.COVALENT.value
        try:
            kind = BondKind(str(kind).lower())
        except ValueError:
            raise MoleculeValidationError(f"Bond {i} type must be 'covalent' or 'ionic'") from None
        bonds.append(Bond(a, b, order, kind))

    name = data.get("name")
    name = name.strip() if isinstance(name, str) and name.strip() else "Custom"
    return Molecule(name, tuple(atoms), tuple(bonds))


def strip_fences(content: str) -> str:
    """Remove Markdown code fences a model may wrap around JSON."""
    return _FENCE_PATTERN.sub("", content).strip()


def build_payload(query: str, model: str = DEFAULT_MODEL) -> dict:
    return {
        "model": model,
        "messages": [{"role": "user", "content": PROMPT_TEMPLATE.format(query=query)}],
    }


def _error_message(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"Failed to fetch data from OpenRouter (HTTP {resp.status_code})"


def fetch_molecule(
    query: str,
    api_key: str,
    model: str = DEFAULT_MODEL,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> Molecule:
    """
    Request a molecule structure and return it validated.

    Raises:
        MoleculeValidationError: bad query or bad structure.
        MoleculeFetchError: transport, HTTP or response-format failure.
    """
    query = validate_query(query)
    if not api_key:
        raise MoleculeValidationError("API key is required.")

    http = session or requests
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "X-Title": "Cosmic Particles",
    }

    try:
        resp = http.post(OPENROUTER_URL, headers=headers, json=build_payload(query, model),
                         timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Molecule request for %r failed: %s", query, exc)
        raise MoleculeFetchError(f"Could not reach OpenRouter: {exc}") from exc

    if not resp.ok:
        message = _error_message(resp)
        logger.warning("Molecule request for %r rejected: %s", query, message)
        raise MoleculeFetchError(message)

    try:
        content = resp.json()["choices"][0]["message"]["content"]
        data = json.loads(strip_fences(content))
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        logger.warning("Unusable molecule response for %r: %s", query, exc)
        raise MoleculeFetchError(f"Unexpected response from model: {exc}") from exc

    try:
        molecule = validate_molecule(data)
    except MoleculeValidationError as exc:
        logger.warning("Invalid molecule structure for %r: %s", query, exc)
        raise

    logger.info("Fetched %s: %d atoms, %d bonds", molecule.name, len(molecule.atoms), len(molecule.bonds))
    return molecule
