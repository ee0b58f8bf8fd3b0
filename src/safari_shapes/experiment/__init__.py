"""Manches, configuration et machine à états de l'expérience."""
