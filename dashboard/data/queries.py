"""
Data access for the dashboard.

Runs the analysis pipeline once per (path, seed, k) and caches the result.
"""

from __future__ import annotations

import os
from pathlib import Path

import polars as pl
import streamlit as st

from mxdev.analysis.pipeline import AnalysisResult, run_analysis
from mxdev.analysis.ranking import rank
from mxdev.config import DEFAULT_DATA_PATH, AnalysisConfig
from mxdev.extraction.loader import load_regions

DATA_PATH = Path(os.getenv("MXDEV_DATA_PATH", str(DEFAULT_DATA_PATH)))


@st.cache_data(show_spinner="Running analysis...")
def load_analysis(path: str, seed: int, n_clusters: int) -> AnalysisResult:
    """Load the regional table and run the full pipeline."""
    config = AnalysisConfig.from_env().with_overrides(seed=seed, n_clusters=n_clusters)
    return run_analysis(load_regions(path), config)


def get_rankings(result: AnalysisResult, key: str, limit: int, ascending: bool) -> pl.DataFrame:
    """Ranking joined with the cluster tier of each region."""
    ranking = rank(result.regions, key, descending=not ascending, n=limit)
    return ranking.join(
        result.regions.select("region", "cluster", "tier_label"),
        on="region",
        how="left",
    ).sort("position")


def get_settings() -> tuple[str, int, int]:
    """Data path, seed and cluster count chosen on the main page."""
    defaults = AnalysisConfig.from_env()
    return (
        st.session_state.get("data_path", str(DATA_PATH)),
        st.session_state.get("seed", defaults.seed),
        st.session_state.get("n_clusters", defaults.n_clusters),
    )
