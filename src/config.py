from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"

OUTPUTS_DIR = PROJECT_ROOT / "outputs"
FIGURES_DIR = OUTPUTS_DIR / "figures"
TABLES_DIR = OUTPUTS_DIR / "tables"
LOGS_DIR = OUTPUTS_DIR / "logs"

# Daily-age cohort table named after Carey & Bradley (1982). The bundled values are
# illustrative stand-ins shaped like a spider-mite life table, not the published data.
MITE_FILE = DATA_DIR / "AtlanticSpiderMite_CareyBradley1982.csv"
MITE_FILE_NOTE = (
    "Note: the bundled mite life table holds illustrative stand-in values, not the "
    "published Carey & Bradley (1982) data; replace the CSV to reproduce the published results."
)

# Age-structured projection
#
# Row-vector convention: n(t) = n(t-1) @ TRANSITION_MATRIX, so entry [i, j] is the
# contribution of class i at t-1 to class j at t.
AGE_CLASSES = ["V1", "V2", "V3"]
TRANSITION_MATRIX = [
    [0.00, 0.50, 0.00],
    [0.00, 0.00, 0.50],
    [4.00, 0.00, 0.10],
]
TMAX = 200
INITIAL_CLASS_SIZE = 1000.0
STABLE_TOTAL = 1000.0

# Life-table columns (as spelled in the CSV)
LIFE_TABLE_AGE_COL = "x"
LIFE_TABLE_SURVIVAL_COL = "P(x)"
LIFE_TABLE_FECUNDITY_COL = "m(x)"
LIFE_TABLE_PRODUCT_COL = "P(x).m(x)"
LIFE_TABLE_COLUMNS = [LIFE_TABLE_AGE_COL, LIFE_TABLE_SURVIVAL_COL, LIFE_TABLE_FECUNDITY_COL]

# Figures (blog theme)
FIGURE_BACKGROUND = (0.2, 0.21, 0.27)
FIGURE_TEXT_COLOR = "grey"
FIGURE_SIZE = (10, 6)
FIGURE_DPI = 150
