"""Whack-a-Mole game engine: a 3x3 board, timed targets and a 60 second round."""
