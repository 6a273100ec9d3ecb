from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from src.config import FIGURE_BACKGROUND, FIGURE_DPI, FIGURE_SIZE, FIGURE_TEXT_COLOR, LIFE_TABLE_AGE_COL
from src.models.growth import GrowthFit, predict_sizes


def save_figure(fig, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=FIGURE_DPI, bbox_inches="tight", facecolor=fig.get_facecolor())


def apply_blog_theme(fig, ax) -> None:
    """Dark slate background with grey text and grid, matching the article's figures."""

    fig.patch.set_facecolor(FIGURE_BACKGROUND)
    ax.set_facecolor(FIGURE_BACKGROUND)
    ax.tick_params(colors=FIGURE_TEXT_COLOR)
    ax.xaxis.label.set_color(FIGURE_TEXT_COLOR)
    ax.yaxis.label.set_color(FIGURE_TEXT_COLOR)
    ax.title.set_color(FIGURE_TEXT_COLOR)
    ax.grid(True, color=FIGURE_TEXT_COLOR, alpha=0.3, linewidth=0.6)
    for spine in ax.spines.values():
        spine.set_visible(False)
    legend = ax.get_legend()
    if legend is not None:
        legend.get_frame().set_alpha(0)
        for text in legend.get_texts():
            text.set_color(FIGURE_TEXT_COLOR)


def plot_age_proportions(long_df: pd.DataFrame):
    wide = long_df.pivot(index="t", columns="age_class", values="proportion").sort_index()
    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    ax.stackplot(wide.index.to_numpy(), wide.to_numpy().T, labels=wide.columns.tolist())
    ax.set_xlabel("t")
    ax.set_ylabel("proportion")
    ax.set_ylim(0, 1)
    ax.legend(title=None, loc="upper right")
    apply_blog_theme(fig, ax)
    fig.tight_layout()
    return fig


def plot_growth_fit(df: pd.DataFrame, fit: GrowthFit, time_col: str = "t", size_col: str = "N"):
    t = df[time_col].to_numpy(dtype=float)
    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    ax.plot(t, df[size_col], color="red", alpha=0.5, label="projected N")
    ax.plot(t, predict_sizes(fit, t), color="grey", label=f"exp({fit.intercept:.3f} + {fit.r:.4f} t)")
    ax.set_yscale("log")
    ax.set_xlabel(time_col)
    ax.set_ylabel(size_col)
    ax.legend()
    apply_blog_theme(fig, ax)
    fig.tight_layout()
    return fig


def plot_life_table(long_df: pd.DataFrame):
    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    for variable, g in long_df.groupby("variable", sort=False):
        g = g.sort_values(LIFE_TABLE_AGE_COL)
        line = ax.plot(g[LIFE_TABLE_AGE_COL], g["value"], label=variable)[0]
        ax.scatter(g[LIFE_TABLE_AGE_COL], g["value"], s=16, color=line.get_color())
    ax.set_xlabel(LIFE_TABLE_AGE_COL)
    ax.set_ylabel("value")
    ax.legend()
    apply_blog_theme(fig, ax)
    fig.tight_layout()
    return fig
