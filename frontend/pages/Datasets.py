# frontend/pages/Datasets.py
import streamlit as st

from tabulens.core.errors import ApiError
from tabulens.utils.formatting import format_file_size, format_upload_date
from tabulens.utils.listing import FILE_TYPE_FILTERS, SORT_OPTIONS, select_datasets, summarize

from utils.session import get_api, get_dataset_store, require_login

st.set_page_config(page_title="My Datasets", layout="wide")
require_login()

api = get_api()
store = get_dataset_store()

st.title("My Datasets")
st.caption("Manage and analyze your uploaded datasets")
st.page_link("pages/Upload.py", label="Upload New", icon="⬆️")

store.fetch_datasets()
snap = store.snapshot()

if snap.loading:
    st.info("Loading datasets...")
    st.stop()

# Stale data banner: the last refresh failed, what we show may be outdated
if snap.error:
    st.error(snap.error)
    if st.button("Try Again"):
        store.fetch_datasets(force=True)
        st.rerun()
    if not snap.datasets:
        st.stop()

# -- Stats bar
summary = summarize(snap.datasets)
c1, c2, c3 = st.columns(3)
c1.metric("Total Datasets", summary.total)
c2.metric("Total Rows", f"{summary.total_rows:,}")
c3.metric(
    "Last Upload",
    format_upload_date(summary.last_upload.uploaded_at) if summary.last_upload else "—",
)

# -- Search / filter / sort
s1, s2, s3 = st.columns([3, 2, 2])
query = s1.text_input("Search datasets...", key="ds_query")
file_type = s2.radio(
    "Type",
    list(FILE_TYPE_FILTERS),
    format_func=FILE_TYPE_FILTERS.get,
    horizontal=True,
    key="ds_type",
)
sort_by = s3.selectbox("Sort", list(SORT_OPTIONS), format_func=SORT_OPTIONS.get, key="ds_sort")

visible = select_datasets(snap.datasets, query=query, file_type=file_type, sort_by=sort_by)


# ------------------------------------------------------------
# Row actions
# ------------------------------------------------------------
def _confirm_delete(dataset_id: int, name: str):
    st.warning(f"Are you sure you want to delete **{name}**? This cannot be undone.")
    yes, no = st.columns(2)
    if yes.button("Delete", key=f"confirm_delete_{dataset_id}", type="primary"):
        try:
            api.datasets.remove(dataset_id)
            store.remove_dataset(dataset_id)
            st.session_state.pop("pending_delete", None)
            st.rerun()
        except ApiError as e:
            st.error(f"Failed to delete dataset. Please try again. ({e})")
    if no.button("Cancel", key=f"cancel_delete_{dataset_id}"):
        st.session_state.pop("pending_delete", None)
        st.rerun()


def _download(dataset_id: int):
    try:
        link = api.datasets.download_url(dataset_id)
    except ApiError as e:
        st.error(f"Failed to download dataset. Please try again. ({e})")
        return
    st.link_button(f"Download {link.filename}", link.download_url)


if not visible:
    st.info("No datasets match your filters." if snap.datasets else "No datasets uploaded yet.")

for ds in visible:
    with st.container(border=True):
        info, actions = st.columns([4, 2])
        info.markdown(f"**{ds.name}**  ·  `{(ds.file_type or '').upper()}`  ·  {ds.status.value.lower()}")
        info.caption(
            f"{ds.total_rows:,} rows • {ds.total_columns} columns • "
            f"{format_file_size(ds.file_size)} • uploaded {format_upload_date(ds.uploaded_at)}"
        )
        v, d, x = actions.columns(3)
        if v.button("View", key=f"view_{ds.id}"):
            st.session_state["selected_dataset_id"] = ds.id
            st.switch_page("pages/Dataset_Detail.py")
        if d.button("Download", key=f"download_{ds.id}"):
            _download(ds.id)
        if x.button("Delete", key=f"delete_{ds.id}"):
            st.session_state["pending_delete"] = ds.id

        if st.session_state.get("pending_delete") == ds.id:
            _confirm_delete(ds.id, ds.name)
