"""Output layer — rich, JSON, and quiet rendering of ServiceResult."""
