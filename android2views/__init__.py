"""Android layout XML -> web (HTML + TypeScript) and Flutter (Dart) views."""

__version__ = "0.1.0"
