from __future__ import annotations

import argparse
import os
import sys
import tempfile
from dataclasses import asdict
from pathlib import Path

_mpl_cache_dir = Path(tempfile.gettempdir()) / "matplotlib"
_mpl_cache_dir.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("MPLCONFIGDIR", str(_mpl_cache_dir))

import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.config import MITE_FILE, MITE_FILE_NOTE, OUTPUTS_DIR  # noqa: E402
from src.data.coding import add_survival_fecundity_product, resolve_life_table_columns  # noqa: E402
from src.data.ingest import load_life_table  # noqa: E402
from src.data.validate import assert_life_table  # noqa: E402
from src.models.life_table import life_table_long, summarize_life_table  # noqa: E402
from src.reporting.figures import plot_life_table, save_figure  # noqa: E402
from src.utils.logging import run_metadata, write_json  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Net reproductive rate and Euler-Lotka growth rate from a cohort life table."
    )
    parser.add_argument("--input", type=Path, default=MITE_FILE, help="Life-table CSV with x, P(x), m(x).")
    parser.add_argument("--outdir", type=Path, default=OUTPUTS_DIR, help="Output directory (default: outputs/).")
    args = parser.parse_args()

    if not args.input.exists():
        raise SystemExit(f"Life table not found: {args.input}")

    using_bundled = args.input.resolve() == MITE_FILE.resolve()
    if using_bundled:
        print(MITE_FILE_NOTE)

    life = resolve_life_table_columns(load_life_table(args.input))
    assert_life_table(life)
    print(life.to_string(index=False))

    figures_dir = args.outdir / "figures"
    tables_dir = args.outdir / "tables"
    logs_dir = args.outdir / "logs"
    tables_dir.mkdir(parents=True, exist_ok=True)

    add_survival_fecundity_product(life).to_csv(tables_dir / "life_table.csv", index=False)

    fig = plot_life_table(life_table_long(life))
    save_figure(fig, figures_dir / "plot3.png")
    plt.close(fig)

    summary = summarize_life_table(life)
    print(f"R0={summary.net_reproductive_rate:.4f} T={summary.generation_time:.4f}")
    print(f"r (ln(R0)/T)={summary.r_approx:.6f} r (Euler-Lotka)={summary.r_euler_lotka:.6f}")
    pd.DataFrame([asdict(summary)]).to_csv(tables_dir / "life_table_summary.csv", index=False)

    meta = run_metadata(input=str(args.input), n_ages=len(life), illustrative_data=using_bundled)
    meta["summary"] = asdict(summary)
    write_json(logs_dir / "life_table_run_metadata.json", meta)

    print(f"Wrote life-table artifacts to {args.outdir}/")


if __name__ == "__main__":
    main()
