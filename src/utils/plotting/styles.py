"""Style application for matplotlib plots.

Seaborn's style as a base with the repository's scientific overrides.
"""

from pathlib import Path

import matplotlib.pyplot as plt
import seaborn as sns


STYLE_PATH = Path(__file__).parent / "scientific.mplstyle"


def apply_styles(context: str = "paper") -> None:
    """Apply seaborn theme and the custom scientific style.

    Parameters
    ----------
    context : str, default "paper"
        Seaborn plotting context ("paper", "notebook", "talk", "poster").
    """
    sns.set_theme(context=context, style="whitegrid")
    if STYLE_PATH.exists():
        plt.style.use(str(STYLE_PATH))
