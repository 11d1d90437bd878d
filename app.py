"""
LingoCard - Illustrated Vocabulary Lesson Cards

Streamlit application that generates a vocabulary lesson for a topic,
draws a search-and-find scene for it and reads words aloud.

Usage:
    streamlit run app.py
"""

import asyncio
import logging

import streamlit as st

from lingocard.config import (
    DEFAULT_WORD_COUNT,
    LOG_FORMAT,
    MAX_WORD_COUNT,
    MIN_WORD_COUNT,
    load_settings,
)
from lingocard.generation import GeminiClient, get_backend_profile
from lingocard.pipeline import LessonPipeline, StateStore
from lingocard.schemas import DifficultyLevel, ImagePayload, ModelTier, PipelineState
from lingocard.viewer import get_loading_caption, render_lesson_card


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

SETTINGS = load_settings()

logging.basicConfig(level=SETTINGS.log_level, format=LOG_FORMAT)

st.set_page_config(
    page_title="LingoCard",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="expanded",
)

MODEL_TIER_LABELS = {
    ModelTier.FAST: "Flash (Fast)",
    ModelTier.BEST: "Pro (Best)",
}


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "store" not in st.session_state:
        st.session_state.store = StateStore()

    if "playing_item" not in st.session_state:
        st.session_state.playing_item = None

    if "pending_speech" not in st.session_state:
        st.session_state.pending_speech = None


def make_client() -> GeminiClient:
    """Build a client for the configured backend profile."""
    return GeminiClient(get_backend_profile(SETTINGS.backend))


# -----------------------------------------------------------------------------
# Actions
# -----------------------------------------------------------------------------

def generate(topic: str, difficulty: DifficultyLevel, word_count: int, model_tier: ModelTier):
    """Run the pipeline, updating a status caption at each phase."""
    store: StateStore = st.session_state.store
    status = st.empty()

    def show_phase(state: PipelineState):
        if state.is_loading:
            status.info(f"{get_loading_caption(state.loading_phase)} Creating \"{state.topic}\"")
        else:
            status.empty()

    store.add_listener(show_phase)
    try:
        pipeline = LessonPipeline(make_client(), store=store, locate_objects=SETTINGS.locate_objects)
        asyncio.run(pipeline.run_generation(topic, difficulty, word_count, model_tier))
    except ValueError as e:
        st.error(str(e))
    finally:
        store.remove_listener(show_phase)


def request_speech(text: str, item_id: str):
    """Queue a clip and rerun so the page renders with its button disabled."""
    if st.session_state.playing_item is not None:
        return
    st.session_state.playing_item = item_id
    st.session_state.pending_speech = text
    st.rerun()


def play_pending_speech():
    """Play the queued clip after the page has rendered, then re-enable buttons."""
    text = st.session_state.pending_speech
    if text is None:
        return
    try:
        asyncio.run(make_client().play_speech(text))
    finally:
        st.session_state.pending_speech = None
        st.session_state.playing_item = None
    st.rerun()


# -----------------------------------------------------------------------------
# Sidebar
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render topic form, settings and word lists."""
    state: PipelineState = st.session_state.store.state

    with st.sidebar:
        st.title("📚 LingoCard")

        with st.form("generate_form"):
            topic = st.text_input("Topic", placeholder="e.g. Coffee Shop, Airport...")

            with st.expander("Advanced Settings"):
                model_tier = st.radio(
                    "Model",
                    list(ModelTier),
                    format_func=lambda t: MODEL_TIER_LABELS[t],
                    horizontal=True,
                )
                word_count = st.slider("Word count", MIN_WORD_COUNT, MAX_WORD_COUNT, DEFAULT_WORD_COUNT)
                difficulty = st.radio(
                    "Level",
                    list(DifficultyLevel),
                    format_func=lambda d: d.value,
                    horizontal=True,
                )

            submitted = st.form_submit_button(
                "Generate Card",
                type="primary",
                use_container_width=True,
                disabled=state.is_loading,
            )

        if submitted and topic.strip():
            generate(topic, difficulty, word_count, model_tier)
            st.rerun()

        if state.content:
            render_word_lists(state)


def render_word_lists(state: PipelineState):
    """Vocabulary and sentences with speak buttons."""
    content = state.content

    st.subheader("Vocabulary")
    for idx, vocab in enumerate(content.vocabulary):
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(f"**{vocab.word}** /{vocab.phonetic}/ · {vocab.translation}")
        with col2:
            item_id = f"vocab-{idx}"
            if st.button("🔊", key=item_id, disabled=st.session_state.playing_item == item_id):
                request_speech(vocab.word, item_id)

    st.subheader("Sentences")
    for idx, sentence in enumerate(content.sentences):
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(f"{sentence.english}  \n*{sentence.chinese}*")
        with col2:
            item_id = f"sent-{idx}"
            if st.button("🔊", key=item_id, disabled=st.session_state.playing_item == item_id):
                request_speech(sentence.english, item_id)

    if content.full_prompt:
        with st.expander("Show AI Prompt"):
            st.code(content.full_prompt, language=None)


# -----------------------------------------------------------------------------
# Card View
# -----------------------------------------------------------------------------

def render_card_view():
    """Render the lesson card or the empty state."""
    state: PipelineState = st.session_state.store.state

    if state.error:
        st.error(state.error)

    if not state.content:
        st.markdown("""
        ## Ready?

        Type a topic in the sidebar to start!
        """)
        return

    st.markdown(render_lesson_card(state.content, state.image_data_uri), unsafe_allow_html=True)

    if state.image_data_uri:
        image = ImagePayload.from_data_uri(state.image_data_uri)
        extension = image.mime_type.split("/")[-1]
        st.download_button(
            "Save Image",
            data=image.data,
            file_name=f"lingocard-{state.content.topic}.{extension}",
            mime=image.mime_type,
        )


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()
    render_card_view()
    play_pending_speech()


if __name__ == "__main__":
    main()
