"""Grille, placement, scoring et comparaison de layouts."""
