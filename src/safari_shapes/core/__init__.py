"""Modèles, table géométrique et erreurs du plateau."""
