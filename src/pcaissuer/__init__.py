"""pcaissuer: certificate signing workflow for AWS Private CA."""

__version__ = "1.0.0"
