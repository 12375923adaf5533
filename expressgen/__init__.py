"""Express Clean Architecture project generator.

Scaffolds an Express.js backend (domain / application / infrastructure /
interfaces layers) with an optional PostgreSQL or MongoDB connection module,
then installs its npm dependencies.
"""

__version__ = "1.0.0"
