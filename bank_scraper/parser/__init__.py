"""Content processing: text normalization, chunking, language tagging, PDF extraction."""
