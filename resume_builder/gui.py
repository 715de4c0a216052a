import streamlit as st

# MUST be the first Streamlit command
st.set_page_config(layout="wide", page_title="Resume Builder")

import logging

from resume_builder import config
from resume_builder.field_store import JsonFileRepository
from resume_builder.generator_rule import wrap_document
from resume_builder.preview import (
    EXPORT_FORMATS,
    PreviewController,
    PreviewStatus,
    export_placeholder,
)
from resume_builder.schema_resume import FIELD_NAMES, ResumeFields

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# httpx logs full request URLs, and the Gemini key travels in the query string
logging.getLogger("httpx").setLevel(logging.WARNING)

TEMPLATE_LABELS = ["Template 1 · Classic", "Template 2 · Sidebar", "Template 3 · Simple"]

FIELD_WIDGETS = {
    # name: (label, multiline, placeholder)
    "name": ("Full Name", False, "Jane Doe"),
    "email": ("Email", False, "jane.doe@example.com"),
    "phone": ("Phone", False, "+1 555 123 4567"),
    "linkedin": ("LinkedIn", False, "linkedin.com/in/janedoe"),
    "location": ("Location", False, "San Francisco, CA"),
    "languages": ("Languages", False, "English, Spanish"),
    "summary": ("Professional Summary", True, "A few sentences about you"),
    "experience": ("Experience", True, "One role or achievement per line"),
    "education": ("Education", True, "One degree per line"),
    "skills": ("Skills", True, "Comma or newline separated"),
    "jobdesc": ("Target Job Description", True, "Paste the job posting here"),
}


@st.cache_resource
def get_controller() -> PreviewController:
    """
    One controller (and store file) per server process.

    Every browser session of this server shares the saved form and API key,
    like localStorage for a single origin. Fine for a local run; a shared
    deployment would need one repository per session in st.session_state.
    """
    cache_dir = config.CACHE_DIR if config.CACHE_RESPONSES else None
    return PreviewController(JsonFileRepository(config.STORE_PATH), cache_dir=cache_dir)


controller = get_controller()

# Initialize session state variables
if "form_loaded" not in st.session_state:
    stored = controller.fields()
    for field_name in FIELD_NAMES:
        st.session_state[f"field_{field_name}"] = getattr(stored, field_name)
    st.session_state.form_loaded = True
if "preview_html" not in st.session_state:
    st.session_state.preview_html = controller.live_preview()
if "ask_api_key" not in st.session_state:
    st.session_state.ask_api_key = False


# --- Callbacks ---
def current_fields() -> ResumeFields:
    return ResumeFields.from_dict(
        {name: st.session_state.get(f"field_{name}", "") for name in FIELD_NAMES}
    )


def on_field_change():
    st.session_state.preview_html = controller.update_fields(current_fields())


def on_template_click(index: int):
    st.session_state.preview_html = controller.select_template(index)


def save_api_key(widget_key: str):
    value = st.session_state.get(widget_key, "")
    if value.strip():
        controller.set_api_key(value)
        st.session_state.ask_api_key = False
        st.toast("API key saved!")


def clear_api_key():
    controller.clear_api_key()
    st.toast("API key cleared. You must enter a key to use AI features.")


def on_submit():
    with st.spinner("Generating resume with AI..."):
        result = controller.submit()
    if result.status is PreviewStatus.NEEDS_API_KEY:
        st.session_state.ask_api_key = True
        st.session_state.preview_html = controller.live_preview()
        return
    st.session_state.preview_html = result.html


# --- Settings (API key) ---
with st.sidebar:
    st.header("⚙️ Settings")
    st.text_input(
        "Gemini API key" if controller.provider == "gemini" else f"{controller.provider.title()} API key",
        type="password",
        key="settings_api_key",
        help="Stored locally and sent only to the AI provider.",
    )
    col_save, col_clear = st.columns(2)
    with col_save:
        st.button("Save key", on_click=save_api_key, args=("settings_api_key",), use_container_width=True)
    with col_clear:
        st.button("Clear key", on_click=clear_api_key, use_container_width=True)
    st.caption(f"Provider: {controller.provider} · Model: {controller.model}")

st.title("📄 Resume Builder")
st.markdown("Fill in your details, pick a template and let the AI write an ATS-friendly resume")

col_form, col_preview = st.columns([2, 3])

with col_form:
    st.markdown("### ✍️ Your Details")
    for field_name in FIELD_NAMES:
        label, multiline, placeholder = FIELD_WIDGETS[field_name]
        widget = st.text_area if multiline else st.text_input
        widget(label, key=f"field_{field_name}", placeholder=placeholder, on_change=on_field_change)

    if st.session_state.ask_api_key:
        st.warning("An API key is required to generate with AI. Save it below, then submit again.")
        st.text_input("Enter your Gemini API key:", type="password", key="prompt_api_key")
        st.button("Save API key", on_click=save_api_key, args=("prompt_api_key",))

    st.button("✨ Generate with AI", type="primary", on_click=on_submit, use_container_width=True)

with col_preview:
    st.markdown("### 🎨 Template")
    selected = controller.template()
    template_cols = st.columns(len(TEMPLATE_LABELS))
    for index, (col, label) in enumerate(zip(template_cols, TEMPLATE_LABELS)):
        with col:
            st.button(
                label,
                key=f"template_btn_{index}",
                type="primary" if index == selected else "secondary",
                on_click=on_template_click,
                args=(index,),
                use_container_width=True,
            )

    st.markdown("### 👀 Preview")
    st.components.v1.html(
        wrap_document(st.session_state.preview_html, inline=True),
        height=900,
        scrolling=True,
    )

    st.markdown("### 📤 Export")
    export_cols = st.columns(len(EXPORT_FORMATS))
    for col, fmt in zip(export_cols, EXPORT_FORMATS):
        with col:
            if st.button(f"Export {fmt.upper()}", key=f"export_{fmt}", use_container_width=True):
                st.toast(export_placeholder(fmt))
