"""
Cluster Analysis Page - PCA summary and region development profiles.

Regions are grouped with K-Means on their first two principal
components; tiers order the clusters by mean development score.
"""

import streamlit as st

st.set_page_config(
    page_title="Cluster Analysis - Mexico Development",
    page_icon="🎯",
    layout="wide",
)

from dashboard.data.queries import get_settings, load_analysis
from mxdev.exceptions import AnalysisError
from mxdev.reporting.charts import TIER_COLORS, cluster_scatter, loadings_chart, scree_chart


def main() -> None:
    """Main page content."""
    st.title("🎯 PCA & Cluster Analysis")

    data_path, seed, n_clusters = get_settings()
    try:
        result = load_analysis(data_path, seed, n_clusters)
    except (AnalysisError, FileNotFoundError) as e:
        st.error(f"Data not available: {e}")
        return

    pca = result.pca
    st.caption(
        f"K-Means with k={result.clustering.n_clusters}, seed={result.clustering.seed}. "
        "Cluster numbers are arbitrary; tiers rank clusters by mean development score."
    )

    # =========================================================================
    # PCA
    # =========================================================================
    st.header("📉 Principal Components")

    col_scree, col_loadings = st.columns(2)
    with col_scree:
        st.plotly_chart(scree_chart(pca), use_container_width=True)
    with col_loadings:
        st.plotly_chart(loadings_chart(pca), use_container_width=True)

    st.metric("Retained information (PC1 + PC2)", f"{pca.retained_information():.2f}%")

    with st.expander("Eigenvalues, loadings and contributions"):
        st.dataframe(pca.summary_frame().to_pandas(), use_container_width=True, hide_index=True)
        st.markdown("**Loadings**")
        st.dataframe(pca.loadings_frame(2).to_pandas(), use_container_width=True, hide_index=True)
        st.markdown("**Contributions (%)**")
        st.dataframe(pca.contributions_frame(2).to_pandas(), use_container_width=True, hide_index=True)
        st.markdown("**Quality of representation (cos2) on PC1-PC2**")
        st.dataframe(pca.cos2_frame(2).to_pandas(), use_container_width=True, hide_index=True)

    # =========================================================================
    # CLUSTERS
    # =========================================================================
    st.header("🗺️ Clusters")

    profiles = result.profiles
    cols = st.columns(len(profiles))
    for col, row in zip(cols, profiles.iter_rows(named=True)):
        color = TIER_COLORS.get(row["cluster_tier"], "#666")
        with col:
            st.markdown(
                f"""<div style='text-align:center; padding:12px;
                background-color:{color}20; border-radius:8px;
                border-left: 4px solid {color};'>
                <h3 style='margin:0; color:{color};'>Cluster {row['cluster']}</h3>
                <small>{row['tier_label']} - {row['num_regions']} regions</small><br>
                <small style='color:#666;'>Score: {row['avg_development']:.2f}</small>
                </div>""",
                unsafe_allow_html=True,
            )

    st.plotly_chart(cluster_scatter(result.regions, pca), use_container_width=True)
    st.caption("*Point size proportional to population.*")

    st.subheader("Cluster Profiles")
    st.dataframe(
        profiles.with_columns(profiles["regions"].list.join(", ")).to_pandas(),
        use_container_width=True,
        hide_index=True,
        column_config={
            "cluster": st.column_config.NumberColumn("Cluster", format="%d"),
            "cluster_tier": st.column_config.NumberColumn("Tier", format="%d"),
            "tier_label": "Tier name",
            "num_regions": st.column_config.NumberColumn("Regions", format="%d"),
            "total_population": st.column_config.NumberColumn("Population", format="%.0f"),
            "avg_development": st.column_config.NumberColumn("Mean score", format="%.3f"),
            "min_development": st.column_config.NumberColumn("Min", format="%.3f"),
            "max_development": st.column_config.NumberColumn("Max", format="%.3f"),
            "avg_material": st.column_config.NumberColumn("Material", format="%.3f"),
            "avg_quality": st.column_config.NumberColumn("Quality", format="%.3f"),
            "avg_subjectivity": st.column_config.NumberColumn("Subjectivity", format="%.3f"),
            "regions": "Members",
        },
    )

    with st.expander("📚 Methodology"):
        st.markdown("""
        1. Composite scores: material (income 0.45, jobs 0.45, housing 0.10),
           quality (health 0.35, education 0.30, environment 0.25, safety 0.05,
           civic engagement 0.05), subjectivity (community 0.30, life
           satisfaction 0.70); development = 0.4 material + 0.4 quality +
           0.2 subjectivity.
        2. PCA on the 11 standardized indicators (correlation matrix).
        3. K-Means (Lloyd) on PC1/PC2, best of several seeded restarts.
        """)


if __name__ == "__main__":
    main()
