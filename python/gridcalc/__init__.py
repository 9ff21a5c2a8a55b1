"""gridcalc - a small spreadsheet grid with a formula engine.

Usage::

    from gridcalc import Sheet

    ws = Sheet()
    ws["A1"] = "1"
    ws["A2"] = "2"
    ws["A3"] = "=SUM(A1:A2)*2"
    print(ws.display("A3"))  # "6"
"""

from gridcalc._config import DEFAULT_CONFIG, GridConfig
from gridcalc._session import EditSession
from gridcalc._sheet import Sheet
from gridcalc.calc import ERROR_VALUE, evaluate

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DEFAULT_CONFIG",
    "ERROR_VALUE",
    "EditSession",
    "GridConfig",
    "Sheet",
    "evaluate",
]
