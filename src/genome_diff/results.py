"""
Results module for genome-diff.
Turns difference records into pandas tables and saves them.
"""

import os
import json
import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from genome_diff.alignment import Difference
from genome_diff.exceptions import FileError

# Configure logging
log = logging.getLogger("genome-diff")

DIFFERENCE_COLUMNS = ["chromosome", "a_start", "a_end", "b_start", "b_end", "a_length", "b_length"]


def differences_to_dataframe(differences: Iterable[Difference]) -> pd.DataFrame:
    """
    Convert differences into a DataFrame, one row per difference.

    Args:
        differences: Difference records

    Returns:
        DataFrame with DIFFERENCE_COLUMNS
    """
    rows = [diff.to_dict() for diff in differences]
    if not rows:
        return pd.DataFrame(columns=DIFFERENCE_COLUMNS)

    df = pd.DataFrame(rows)
    df["a_length"] = df["a_end"] - df["a_start"]
    df["b_length"] = df["b_end"] - df["b_start"]
    return df[DIFFERENCE_COLUMNS]


def summarize_by_chromosome(differences: Iterable[Difference]) -> pd.DataFrame:
    """
    Count differences and their total span per chromosome.

    Returns:
        DataFrame indexed by chromosome with difference_count, a_bases and b_bases
    """
    df = differences_to_dataframe(differences)
    if df.empty:
        return pd.DataFrame(columns=["difference_count", "a_bases", "b_bases"]).rename_axis("chromosome")

    return df.groupby("chromosome").agg(
        difference_count=("a_start", "size"),
        a_bases=("a_length", "sum"),
        b_bases=("b_length", "sum"),
    )


def save_differences(differences: Iterable[Difference], output_path) -> Path:
    """
    Save differences as CSV or JSON, chosen by the file suffix.

    Args:
        differences: Difference records
        output_path: Destination ending in .csv or .json

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()
    if suffix not in (".csv", ".json"):
        error_msg = f"Unsupported output format: {suffix or '(none)'}"
        log.error(error_msg)
        raise FileError(error_msg, details=str(output_path))

    df = differences_to_dataframe(differences)
    try:
        os.makedirs(output_path.parent, exist_ok=True)
        if suffix == ".csv":
            df.to_csv(output_path, index=False)
        else:
            with open(output_path, "w") as f:
                json.dump(df.to_dict(orient="records"), f, indent=2, default=int)
    except OSError as e:
        error_msg = f"Error saving differences to {output_path}"
        log.error(f"{error_msg}: {e}")
        raise FileError(error_msg, details=str(e))

    log.info(f"Saved {len(df)} differences to {output_path}")
    return output_path
