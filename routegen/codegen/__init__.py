"""Registry module rendering and formatting."""

from .formatter import IdentityFormatter, SubprocessFormatter, TextCanonicalizer
from .generator import ManifestCodeGenerator, RegistryEntry, to_import_specifier

__all__ = [
    "IdentityFormatter",
    "ManifestCodeGenerator",
    "RegistryEntry",
    "SubprocessFormatter",
    "TextCanonicalizer",
    "to_import_specifier",
]
