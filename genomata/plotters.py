import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from .grid import Grid


def grid_image(grid: Grid, show_dead: bool = True) -> np.ndarray:
    """
    RGB image (HEIGHT, WIDTH, 3) in [0, 1] of the grid.

    Live bots use their own color, corpses are drawn dark grey,
    empty cells black.
    """
    img = np.zeros((grid.height, grid.width, 3), dtype=float)
    for bot in grid:
        if bot.alive:
            img[bot.y, bot.x] = bot.color.as_float()[:3]
        elif show_dead and not bot.empty:
            img[bot.y, bot.x] = (0.25, 0.25, 0.25)
    return img


def plot_grid(grid: Grid, outpath: str, title: str = ""):
    plt.figure(figsize=(8, 8 * grid.height / max(grid.width, 1)))
    plt.imshow(grid_image(grid), interpolation="nearest")
    plt.axis("off")
    if title:
        plt.title(title)
    plt.tight_layout(); plt.savefig(outpath); plt.close()


def plot_population(df: pd.DataFrame, outpath: str):
    plt.figure(figsize=(10, 5))
    plt.plot(df["t"].values, df["alive"].values, label="alive")
    plt.plot(df["t"].values, df["dead"].values, label="dead")
    plt.xlabel("tick"); plt.ylabel("cells")
    plt.title("Population")
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout(); plt.savefig(outpath); plt.close()


def plot_energy(df: pd.DataFrame, outpath: str):
    fig, axes = plt.subplots(3, 1, figsize=(10, 8), sharex=True)

    axes[0].plot(df["t"], df["energy_mean"], 'b-', alpha=0.7)
    axes[0].set_ylabel("mean energy")
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(df["t"], df["age_mean"], 'r-', alpha=0.7)
    axes[1].set_ylabel("mean age")
    axes[1].grid(True, alpha=0.3)

    axes[2].plot(df["t"], df["genome_diversity"], 'g-', alpha=0.7)
    axes[2].set_ylabel("genome diversity")
    axes[2].set_xlabel("tick")
    axes[2].grid(True, alpha=0.3)

    plt.tight_layout(); plt.savefig(outpath); plt.close()


def plot_instruction_usage(df: pd.DataFrame, outpath: str, top: int = 8):
    """Stacked area of the most used opcodes over time"""
    cols = [c for c in df.columns if c.startswith("op_")]
    if not cols:
        return
    totals = df[cols].sum().sort_values(ascending=False)
    keep = list(totals.index[:top])
    plt.figure(figsize=(10, 5))
    plt.stackplot(df["t"].values, [df[c].values for c in keep],
                  labels=[c[3:] for c in keep], alpha=0.8)
    plt.xlabel("tick"); plt.ylabel("live bots")
    plt.title("Instruction under pointer")
    plt.legend(loc="upper left", fontsize=7)
    plt.tight_layout(); plt.savefig(outpath); plt.close()
