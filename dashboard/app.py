"""
Mexico Regional Development Dashboard.

Main entry point for the Streamlit multi-page application. The sidebar
sets the data file, random seed and cluster count shared by every page.

Run from the project root so the ``dashboard`` package is importable:
    python -m streamlit run dashboard/app.py
"""

from pathlib import Path

import streamlit as st

# Page configuration - must be first Streamlit command
st.set_page_config(
    page_title="Mexico Regional Development",
    page_icon="🇲🇽",
    layout="wide",
    initial_sidebar_state="expanded",
)

from dashboard.data.queries import get_settings, load_analysis
from mxdev.exceptions import AnalysisError
from mxdev.extraction.loader import missing_table_help


def main() -> None:
    """Main application entry point."""
    data_path, seed, n_clusters = get_settings()

    with st.sidebar:
        st.title("🇲🇽 Development Analysis")
        st.markdown("---")
        st.session_state["data_path"] = st.text_input("Regional table (CSV)", value=data_path)
        st.session_state["seed"] = int(st.number_input("Random seed", value=seed, step=1))
        st.session_state["n_clusters"] = int(
            st.number_input("Clusters (k)", min_value=1, max_value=32, value=n_clusters, step=1)
        )

    st.title("🇲🇽 Mexico Regional Development")
    st.markdown("### Composite development scores, PCA and clustering across 32 federal entities")

    data_path = st.session_state["data_path"]
    if not Path(data_path).exists():
        st.warning(f"⚠️ **Data not found.** {missing_table_help(data_path)}")
        return

    try:
        result = load_analysis(data_path, st.session_state["seed"], st.session_state["n_clusters"])
    except AnalysisError as e:
        st.error(f"Analysis failed: {e}")
        return

    regions = result.regions
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric(label="Regions", value=f"{len(regions)}")
    with col2:
        st.metric(label="Population", value=f"{regions['population'].sum() / 1_000_000:.1f}M")
    with col3:
        st.metric(
            label="Mean development score",
            value=f"{regions['development_model'].mean():.2f}",
            help="0.4 material + 0.4 quality + 0.2 subjectivity",
        )
    with col4:
        st.metric(
            label="Variance kept (PC1+PC2)",
            value=f"{result.pca.retained_information():.1f}%",
        )

    st.markdown("---")
    st.subheader("📋 Scored Regions")
    st.dataframe(
        regions.select(
            "region", "material", "quality", "subjectivity", "development_model",
            "cluster", "tier_label",
        ).sort("development_model", descending=True).to_pandas(),
        use_container_width=True,
        hide_index=True,
        column_config={
            "region": "Region",
            "material": st.column_config.NumberColumn("Material", format="%.3f"),
            "quality": st.column_config.NumberColumn("Quality", format="%.3f"),
            "subjectivity": st.column_config.NumberColumn("Subjectivity", format="%.3f"),
            "development_model": st.column_config.NumberColumn("Development", format="%.3f"),
            "cluster": st.column_config.NumberColumn("Cluster", format="%d"),
            "tier_label": "Tier",
        },
    )


if __name__ == "__main__":
    main()
