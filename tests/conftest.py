from pathlib import Path

import numpy as np
import polars as pl
import pytest

from mxdev.config import INDICATOR_COLUMNS

STATES = [
    "Aguascalientes", "Baja California", "Baja California Sur", "Campeche",
    "Coahuila", "Colima", "Chiapas", "Chihuahua", "Distrito Federal",
    "Durango", "Guanajuato", "Guerrero", "Hidalgo", "Jalisco", "Mexico",
    "Michoacan", "Morelos", "Nayarit", "Nuevo Leon", "Oaxaca", "Puebla",
    "Queretaro", "Quintana Roo", "San Luis Potosi", "Sinaloa", "Sonora",
    "Tabasco", "Tamaulipas", "Tlaxcala", "Veracruz", "Yucatan", "Zacatecas",
]


def make_regions(n: int = 32, seed: int = 2024) -> pl.DataFrame:
    """Synthetic regional table with a latent development level per region."""
    rng = np.random.default_rng(seed)
    latent = rng.uniform(2.0, 8.0, size=n)

    data = {"region": STATES[:n] if n <= len(STATES) else [f"Region {i}" for i in range(n)]}
    data["population"] = rng.integers(700_000, 16_000_000, size=n).astype(float)
    for i, column in enumerate(INDICATOR_COLUMNS):
        loading = 0.3 + 0.06 * i
        values = latent * loading + rng.normal(5.0 * (1 - loading), 1.2, size=n)
        data[column] = np.clip(values, 0.0, 10.0)
    data["income_per_capita"] = 3_000 + latent * 1_500 + rng.normal(0, 300, size=n)
    data["mortality_rate"] = 8.0 - latent * 0.4 + rng.normal(0, 0.3, size=n)
    data["life_expectancy"] = 72.0 + latent * 0.6 + rng.normal(0, 0.5, size=n)
    return pl.DataFrame(data)


@pytest.fixture
def regions_df() -> pl.DataFrame:
    return make_regions()


@pytest.fixture
def three_regions() -> pl.DataFrame:
    """Three regions where only the material indicators differ."""
    data = {"region": ["Alpha", "Beta", "Gamma"]}
    for column in INDICATOR_COLUMNS:
        data[column] = [0.0, 0.0, 0.0]
    data["income"] = [10.0, 10.0, 0.0]
    data["jobs"] = [10.0, 10.0, 0.0]
    data["housing"] = [10.0, 10.0, 0.0]
    return pl.DataFrame(data)


@pytest.fixture
def regions_csv(tmp_path: Path, regions_df: pl.DataFrame) -> Path:
    path = tmp_path / "regions.csv"
    regions_df.write_csv(path)
    return path
