"""Rotation puzzle engine over Hamiltonian paths on a grid."""

__version__ = "0.1.0"
