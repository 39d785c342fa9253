"""Obra Control: construction budget valuation tools.

The package turns decoded spreadsheet rows into a hierarchical budget, overlays
contract modifications on it and values progress reports against the contract,
the planned cost curve and the financial disbursements.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
