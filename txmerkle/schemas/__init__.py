"""
Schemas - Errors and Versioning

Error taxonomy shared by every txmerkle module, plus schema version
constants. The JSON documents live in txmerkle.schemas.documents and are
imported from there directly.
"""

from .errors import (
    ErrorCodes,
    MerkleError,
    TxMerkleException,
    InvalidInputError,
    IndexOutOfRangeError,
    ConfigurationException,
    SchemaValidationException,
)
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "MerkleError",
    "TxMerkleException",
    "InvalidInputError",
    "IndexOutOfRangeError",
    "ConfigurationException",
    "SchemaValidationException",
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
]
