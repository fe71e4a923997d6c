"""Data-access collaborators for the prediction engine."""
