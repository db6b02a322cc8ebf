"""
app/widget/streamlit_app.py

Streamlit page rendering the UploadWidget.

Run with ``streamlit run app/widget/streamlit_app.py`` while the relay is
served at ``settings.relay_base_url``.
"""

import httpx
import streamlit as st

from app.core.config import settings
from app.models.upload_models import DocumentCategory, Environment
from app.widget.state import CandidateFile, ConnectivityStatus, UploadStatus
from app.widget.upload_widget import UploadWidget
from app.widget.validation import format_file_size

_CATEGORY_LABELS = {
    DocumentCategory.INVOICE: "Invoice",
    DocumentCategory.RECEIPT_NOTE: "Receipt note",
}


def _widget() -> UploadWidget:
    """One widget (and one HTTP client) per browser session."""
    if "upload_widget" not in st.session_state:
        client = httpx.Client(
            base_url=settings.relay_base_url,
            timeout=settings.widget_http_timeout_seconds,
        )
        st.session_state.upload_widget = UploadWidget(
            client, environment_aware=settings.widget_environment_aware
        )
    if "picker_generation" not in st.session_state:
        st.session_state.picker_generation = 0
    if "picked_signature" not in st.session_state:
        st.session_state.picked_signature = ()
    return st.session_state.upload_widget


def _render_environment(widget: UploadWidget) -> None:
    options = [e.value for e in Environment]
    chosen = st.radio(
        "Environment",
        options,
        index=options.index(widget.environment),
        horizontal=True,
    )
    if chosen != widget.environment:
        widget.select_environment(chosen)

    if st.button("Test connectivity", disabled=not widget.can_test_connectivity):
        with st.spinner("Testing connectivity..."):
            widget.test_connectivity()

    state = widget.connectivity
    if state.status is ConnectivityStatus.SUCCESS:
        st.success(state.message)
    elif state.status is ConnectivityStatus.ERROR:
        st.error(state.message)


def _render_picker(widget: UploadWidget) -> None:
    # accept_multiple_files so a multi-file drop reaches the widget and is refused there.
    uploaded = st.file_uploader(
        "Drag and drop your file here, or browse",
        accept_multiple_files=True,
        key=f"picker-{st.session_state.picker_generation}",
    )
    uploaded = uploaded or []
    signature = tuple((f.name, f.size) for f in uploaded)
    if signature == st.session_state.picked_signature:
        return
    st.session_state.picked_signature = signature
    if uploaded:
        widget.drop(
            [CandidateFile(f.name, f.getvalue(), f.type or "") for f in uploaded]
        )
    else:
        # File removed from the uploader.
        widget.reset()


def _render_selection(widget: UploadWidget) -> None:
    selected = widget.selected_file
    if selected is None:
        return
    with st.container(border=True):
        st.markdown(f"**{selected.name}**")
        st.caption(format_file_size(selected.size))
        st.markdown(f"Detected type: **{_CATEGORY_LABELS[selected.category]}**")


def _render_status(widget: UploadWidget) -> None:
    state = widget.upload
    if not state.message:
        return
    if state.status is UploadStatus.SUCCESS:
        st.success(state.message)
        if state.relay_message:
            st.info(state.relay_message)
    elif state.status is UploadStatus.ERROR:
        st.error(state.message)
    else:
        st.info(state.message)


def main() -> None:
    st.set_page_config(page_title="Invoice / Receipt Matching")
    st.title("Drop a document")
    st.markdown("PDF = invoice, XLSX = receipt note.  \nOne file at a time (15 MB max).")

    widget = _widget()

    if widget.environment_aware:
        _render_environment(widget)

    _render_picker(widget)
    _render_selection(widget)

    if st.button("Process", disabled=not widget.can_submit, use_container_width=True):
        with st.spinner(widget.status_message or "Processing..."):
            widget.submit()

    _render_status(widget)

    if widget.can_reset and st.button("Upload another document", use_container_width=True):
        widget.reset()
        st.session_state.picker_generation += 1
        st.session_state.picked_signature = ()
        st.rerun()


main()
