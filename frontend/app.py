import streamlit as st

from tabulens.core.config import settings
from tabulens.core.errors import ApiError, FormValidationError
from tabulens.services.session import sign_out
from tabulens.utils.formatting import format_file_size, format_upload_date
from tabulens.utils.listing import summarize

from utils.session import get_api, get_auth_store, get_dataset_store

st.set_page_config(page_title=settings.project_name, page_icon="📊", layout="wide")

api = get_api()
auth_store = get_auth_store()
store = get_dataset_store()


def _show_field_errors(err: FormValidationError):
    for field, messages in err.field_errors.items():
        for msg in messages:
            st.error(f"{field.replace('_', ' ').capitalize()}: {msg}")


# ------------------------------------------------------------
# Anonymous: login / register
# ------------------------------------------------------------
def render_auth():
    st.title(settings.project_name)
    st.caption("Upload CSV or Excel files and explore their statistics.")

    login_tab, register_tab = st.tabs(["Log in", "Create account"])

    with login_tab:
        with st.form("login"):
            email = st.text_input("Email", placeholder="email@example.com")
            password = st.text_input("Password", type="password")
            remember = st.checkbox("Remember me")
            submitted = st.form_submit_button("Log in")
        if submitted:
            try:
                user = api.auth.login({"email": email, "password": password, "remember_me": remember})
                auth_store.set_user(user or {"email": email})
                st.rerun()
            except FormValidationError as e:
                _show_field_errors(e)
            except ApiError as e:
                st.error(e.message or "Login failed")

    with register_tab:
        with st.form("register"):
            name = st.text_input("Full name")
            email = st.text_input("Email", key="register_email")
            password = st.text_input("Password", type="password", key="register_password")
            confirm = st.text_input("Confirm password", type="password")
            submitted = st.form_submit_button("Create account")
        if submitted:
            try:
                user = api.auth.register(
                    {"name": name, "email": email, "password": password, "confirm_password": confirm}
                )
                auth_store.set_user(user or {"name": name, "email": email})
                st.rerun()
            except FormValidationError as e:
                _show_field_errors(e)
            except ApiError as e:
                st.error(e.message or "Registration failed")


# ------------------------------------------------------------
# Signed in: overview
# ------------------------------------------------------------
def render_home():
    user = auth_store.user or {}
    st.title("Dashboard")
    st.caption(f"Welcome back{', ' + user['name'] if user.get('name') else ''}! Here's what's happening with your data.")

    with st.sidebar:
        if st.button("Log out"):
            try:
                sign_out(api.auth, auth_store, store)
            except ApiError as e:
                st.warning(f"Logout request failed: {e}")
            st.rerun()

    store.fetch_datasets()
    snap = store.snapshot()
    if snap.error:
        st.warning(f"{snap.error}. Showing the last loaded data.")

    summary = summarize(snap.datasets)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Datasets", f"{summary.total}")
    c2.metric("Total Rows", f"{summary.total_rows:,}")
    c3.metric(
        "Last Upload",
        format_upload_date(summary.last_upload.uploaded_at) if summary.last_upload else "—",
    )
    c4.metric("Storage Used", format_file_size(summary.total_bytes))

    st.subheader("Quick Actions")
    q1, q2, q3 = st.columns(3)
    q1.page_link("pages/Upload.py", label="Upload Dataset", icon="⬆️")
    q2.page_link("pages/Datasets.py", label="My Datasets", icon="🗂️")
    q3.page_link("pages/Settings.py", label="Settings", icon="⚙️")

    st.subheader("Recent Datasets")
    if not snap.datasets:
        st.info("No datasets yet. Upload one to get started.")
    for ds in snap.datasets[:3]:
        left, right = st.columns([4, 1])
        left.markdown(
            f"**{ds.name}**  \n{ds.total_rows:,} rows • Uploaded {format_upload_date(ds.uploaded_at)}"
        )
        right.caption(ds.status.value.lower())


if auth_store.is_authenticated:
    render_home()
else:
    render_auth()
