"""List-Curation-Service package."""
