# frontend/pages/Settings.py
import streamlit as st

from tabulens.core.errors import ApiError
from tabulens.schemas.user import DatasetPrefs, NotificationPrefs

from utils.api_client import LOGIN_PAGE
from utils.session import get_api, get_auth_store, get_dataset_store, require_login

st.set_page_config(page_title="Settings", page_icon="⚙️")
require_login()

api = get_api()

st.header("⚙️ Settings")
st.caption("Manage your account settings and preferences")

try:
    profile = api.users.get_profile()
except ApiError as e:
    st.error(f"Failed to fetch profile: {e}")
    st.stop()

dataset_prefs = profile.dataset_prefs or DatasetPrefs()
notification_prefs = profile.notification_prefs or NotificationPrefs()

profile_tab, datasets_tab, notifications_tab, security_tab = st.tabs(
    ["Profile", "Datasets", "Notifications", "Security"]
)


def _save_preferences(dp: DatasetPrefs, np_: NotificationPrefs):
    try:
        api.users.update_preferences(dp, np_)
        st.success("Preferences updated successfully!")
    except ApiError as e:
        st.error(f"Failed to update preferences: {e}")


# ------------------------------------------------------------
# Profile
# ------------------------------------------------------------
with profile_tab:
    if profile.image_url:
        st.image(profile.image_url, width=96)
    if not profile.can_change_email:
        st.caption(f"Signed in with {profile.provider}")

    name = st.text_input("Full Name", value=profile.name)
    st.text_input(
        "Email Address",
        value=profile.email or "",
        disabled=not profile.can_change_email,
        help=None if profile.can_change_email else f"Email cannot be changed for {profile.provider} accounts",
    )
    if st.button("Save Changes", key="save_profile"):
        try:
            api.users.update_profile(name)
            st.success("Profile updated successfully!")
        except ApiError as e:
            st.error(f"Failed to update profile: {e}")

# ------------------------------------------------------------
# Dataset preferences
# ------------------------------------------------------------
with datasets_tab:
    auto_delete = st.toggle("Auto-delete old datasets", value=dataset_prefs.auto_delete)
    auto_delete_days = st.number_input(
        "Delete after (days)", min_value=1, max_value=365,
        value=dataset_prefs.auto_delete_days, disabled=not auto_delete,
    )
    max_file_size = st.number_input("Maximum file size (MB)", min_value=1, max_value=500, value=dataset_prefs.max_file_size)
    chart_types = ["line", "bar", "pie", "scatter"]
    default_chart = st.selectbox(
        "Default chart type", chart_types,
        index=chart_types.index(dataset_prefs.default_chart_type) if dataset_prefs.default_chart_type in chart_types else 0,
    )
    if st.button("Save Preferences", key="save_dataset_prefs"):
        _save_preferences(
            DatasetPrefs(
                auto_delete=auto_delete,
                auto_delete_days=int(auto_delete_days),
                max_file_size=int(max_file_size),
                default_chart_type=default_chart,
            ),
            notification_prefs,
        )

# ------------------------------------------------------------
# Notifications
# ------------------------------------------------------------
with notifications_tab:
    prefs = NotificationPrefs(
        upload_complete=st.checkbox("Upload complete", value=notification_prefs.upload_complete),
        upload_failed=st.checkbox("Upload failed", value=notification_prefs.upload_failed),
        weekly_report=st.checkbox("Weekly report", value=notification_prefs.weekly_report),
        storage_warning=st.checkbox("Storage warning", value=notification_prefs.storage_warning),
    )
    if st.button("Save Preferences", key="save_notification_prefs"):
        _save_preferences(dataset_prefs, prefs)

# ------------------------------------------------------------
# Security: account deletion
# ------------------------------------------------------------
with security_tab:
    st.subheader("Danger zone")
    st.warning("Deleting your account removes all of your datasets permanently.")
    confirmation = st.text_input('Type "DELETE" to confirm')
    if st.button("Delete Account", type="primary", disabled=confirmation != "DELETE"):
        try:
            api.users.delete_account()
        except ApiError as e:
            st.error(f"Failed to delete account: {e}")
            st.stop()
        get_auth_store().logout()
        get_dataset_store().clear_datasets()
        st.switch_page(LOGIN_PAGE)
