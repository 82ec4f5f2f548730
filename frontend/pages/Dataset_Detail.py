# frontend/pages/Dataset_Detail.py
import pandas as pd
import plotly.graph_objs as go
import streamlit as st

from tabulens.core.config import settings
from tabulens.core.errors import ApiError, NotFoundError
from tabulens.schemas.dataset import preview_columns
from tabulens.utils.formatting import format_file_size, format_upload_datetime, safe_date
from tabulens.utils.listing import parse_dataset_id

from utils.session import get_api, get_dataset_store, require_login

st.set_page_config(page_title="Dataset", layout="wide")
require_login()

api = get_api()
store = get_dataset_store()

raw_id = st.query_params.get("id") or st.session_state.get("selected_dataset_id")
dataset_id = parse_dataset_id(raw_id)
if dataset_id is None:
    st.info("Pick a dataset from My Datasets.")
    st.page_link("pages/Datasets.py", label="Back to datasets", icon="⬅️")
    st.stop()

# Render from the cache first, then refresh this one entry from the backend
dataset = store.get_dataset_by_id(dataset_id)
try:
    fresh = api.datasets.get(dataset_id)
    store.replace_dataset(fresh)
    dataset = fresh
except NotFoundError:
    store.remove_dataset(dataset_id)
    st.error("Dataset not found. It may have been deleted.")
    st.stop()
except ApiError as e:
    if dataset is None:
        st.error(f"Failed to load dataset: {e}")
        st.stop()
    st.warning(f"Showing cached details, refresh failed: {e}")

st.page_link("pages/Datasets.py", label="Back to datasets", icon="⬅️")
st.title(dataset.name)
st.caption(f"Status: {dataset.status.value.lower()} · Last updated {safe_date(dataset.updated_at)}")

# -- Quick stats
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Rows", f"{dataset.total_rows:,}")
c2.metric("Columns", dataset.total_columns)
c3.metric("File Size", format_file_size(dataset.file_size))
c4.metric("Upload Date", format_upload_datetime(dataset.uploaded_at))

a1, a2, _ = st.columns([1, 1, 4])
if a1.button("Download"):
    try:
        link = api.datasets.download_url(dataset_id)
        st.link_button(f"Download {link.filename}", link.download_url)
    except ApiError as e:
        st.error(f"Failed to download dataset. Please try again. ({e})")
if a2.button("Delete"):
    st.session_state["pending_delete"] = dataset_id

if st.session_state.get("pending_delete") == dataset_id:
    st.warning("Are you sure you want to delete this dataset?")
    yes, no = st.columns(2)
    if yes.button("Yes, delete", type="primary"):
        try:
            api.datasets.remove(dataset_id)
            store.remove_dataset(dataset_id)
            st.session_state.pop("pending_delete", None)
            st.session_state.pop("selected_dataset_id", None)
            st.switch_page("pages/Datasets.py")
        except ApiError as e:
            st.error(f"Failed to delete dataset. Please try again. ({e})")
    if no.button("Cancel"):
        st.session_state.pop("pending_delete", None)
        st.rerun()

# -- Column statistics / preview are read-through, never cached in the store
with st.spinner("Loading column statistics..."):
    try:
        columns = api.datasets.columns(dataset_id)
    except ApiError as e:
        st.warning(f"Column statistics not available yet: {e}")
        columns = []

overview, data_tab, charts = st.tabs(["Overview", "Data", "Charts"])

with overview:
    st.subheader("Column Statistics")
    if columns:
        col_rows = []
        for c in columns:
            col_rows.append({
                "column": c.column_name,
                "type": c.data_type.value.lower(),
                "unique": c.unique_values,
                "nulls": c.null_count,
                "mean": round(c.mean, 2) if c.mean is not None else None,
                "median": c.median,
                "std": round(c.std_dev, 2) if c.std_dev is not None else None,
                "min": c.min_value,
                "max": c.max_value,
            })
        st.dataframe(pd.DataFrame(col_rows), use_container_width=True, hide_index=True)
    else:
        st.info("No column statistics yet.")

with data_tab:
    limit = st.number_input("Rows to preview", min_value=1, max_value=1000, value=settings.preview_limit, step=1)
    try:
        rows = api.datasets.preview(dataset_id, limit=int(limit))
    except ApiError as e:
        st.error(f"Failed to load preview: {e}")
        rows = []
    if rows:
        st.dataframe(
            pd.DataFrame.from_records(rows, columns=preview_columns(rows)),
            use_container_width=True,
            height=350,
        )
    else:
        st.info("No preview data available.")

with charts:
    if not columns:
        st.info("Charts need column statistics.")
    else:
        names = [c.column_name for c in columns]

        st.subheader("Unique vs null values")
        fig = go.Figure(data=[
            go.Bar(name="unique", x=names, y=[c.unique_values for c in columns]),
            go.Bar(name="nulls", x=names, y=[c.null_count for c in columns]),
        ])
        fig.update_layout(barmode="group", height=400, margin=dict(l=0, r=0, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)

        st.subheader("Column types")
        type_counts = pd.Series([c.data_type.value.lower() for c in columns]).value_counts()
        pie = go.Figure(data=[go.Pie(labels=type_counts.index.tolist(), values=type_counts.values.tolist())])
        pie.update_layout(height=350, margin=dict(l=0, r=0, t=10, b=10))
        st.plotly_chart(pie, use_container_width=True)

        numeric = [c for c in columns if c.is_numeric and c.min_value is not None and c.max_value is not None]
        if numeric:
            st.subheader("Numeric ranges")
            num_names = [c.column_name for c in numeric]
            rng = go.Figure(data=[
                go.Bar(name="min", x=num_names, y=[c.min_value for c in numeric]),
                go.Bar(name="mean", x=num_names, y=[c.mean for c in numeric]),
                go.Bar(name="max", x=num_names, y=[c.max_value for c in numeric]),
            ])
            rng.update_layout(barmode="group", height=400, margin=dict(l=0, r=0, t=10, b=10))
            st.plotly_chart(rng, use_container_width=True)
