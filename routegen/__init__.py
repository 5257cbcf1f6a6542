"""Route and island manifest builder."""

from .collector import ManifestCollector
from .coordinator import ChangeCoordinator, Mode
from .devloop import dev
from .models import Manifest
from .scanner import DirectoryScanner

__all__ = [
    "ChangeCoordinator",
    "DirectoryScanner",
    "Manifest",
    "ManifestCollector",
    "Mode",
    "dev",
]

__version__ = "0.1.0"
