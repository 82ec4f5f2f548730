# frontend/pages/Upload.py
import time

import streamlit as st

from tabulens.core.config import settings
from tabulens.core.errors import ApiError, UploadRejectedError
from tabulens.utils.formatting import format_file_size
from tabulens.utils.uploads import check_upload, file_type_for

from utils.session import get_api, get_dataset_store, require_login

st.set_page_config(page_title="Upload Dataset", layout="wide")
require_login()

api = get_api()
store = get_dataset_store()

st.title("Upload Dataset")
st.caption("Upload a CSV or Excel file to analyze your data")

uploaded = st.file_uploader(
    "Drag & drop your file here",
    type=[ext.lstrip(".") for ext in settings.allowed_extension_list()],
    accept_multiple_files=False,
)
st.caption(f"Supported formats: CSV, Excel (.xlsx, .xls) · Maximum file size: {settings.max_upload_mb}MB")

if uploaded is not None:
    st.markdown(f"**{uploaded.name}** · `{file_type_for(uploaded.name)}` · {format_file_size(uploaded.size)}")

    try:
        check_upload(uploaded.name, uploaded.size)
    except UploadRejectedError as e:
        st.error(str(e))
        st.stop()

    if st.button("Upload & Analyze", type="primary"):
        bar = st.progress(0, text="Uploading...")

        def on_progress(percent: int):
            bar.progress(percent, text=f"Uploading... {percent}%")

        try:
            dataset = api.datasets.upload(uploaded.name, uploaded.getvalue(), on_progress=on_progress)
        except ApiError as e:
            st.error(f"Upload failed. Please try again. ({e})")
            st.stop()

        store.add_dataset(dataset)
        st.success("Upload successful! Redirecting to your datasets...")
        time.sleep(1.5)
        st.switch_page("pages/Datasets.py")

with st.expander("Tips for best results"):
    st.markdown(
        "- Ensure your CSV/Excel file has column headers in the first row\n"
        "- Remove any empty rows or columns before uploading\n"
        "- Use consistent date formats throughout your dataset\n"
        "- Files are processed securely and automatically deleted after analysis"
    )
