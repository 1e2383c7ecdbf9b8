"""
imtree - fixed-depth, append-only, incrementally hashed Merkle tree.
"""

__version__ = "0.1.0"
