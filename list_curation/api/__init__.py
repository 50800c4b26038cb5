"""HTTP routes for List-Curation-Service."""
